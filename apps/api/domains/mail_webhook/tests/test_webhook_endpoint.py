"""Tests for POST /budget-email, the statement email webhook."""

import httpx
import pytest
from fastapi.testclient import TestClient

from apps.api.deps import get_http_client
from apps.api.domains.mail_webhook.sink import get_transaction_sink
from apps.api.domains.mail_webhook.tests.fakes import DISCOVERY_CSV, make_payload
from apps.api.main import app


@pytest.fixture
def client(mail_service, sink):
    async def _mock_http_client():
        async with httpx.AsyncClient(transport=httpx.MockTransport(mail_service.handler)) as c:
            yield c

    app.dependency_overrides[get_http_client] = _mock_http_client
    app.dependency_overrides[get_transaction_sink] = lambda: sink
    c = TestClient(app)
    yield c
    app.dependency_overrides.clear()


def test_capitec_statement_is_processed(client, mail_service, sink):
    response = client.post("/budget-email", json=make_payload())

    assert response.status_code == 200
    assert response.json() == {"status": "processed"}
    assert mail_service.call_sequence == ["validate", "fetch", "delete"]


def test_transactions_reach_sink_newest_first(client, sink):
    client.post("/budget-email", json=make_payload())

    ((filename, transactions),) = sink.batches
    assert filename == "account_statement_2024-07.csv"
    assert [t.description for t in transactions] == ["Checkers", "Salary"]
    assert transactions[1].amount == 123456


def test_discovery_statement_is_processed(client, mail_service, sink):
    mail_service.attachment_body = DISCOVERY_CSV

    response = client.post("/budget-email", json=make_payload("DiscoveryBank_Statement.csv"))

    assert response.status_code == 200
    assert "count" not in response.json()
    (_, transactions) = sink.batches[0]
    assert len(transactions) == 2
    assert transactions[0].description == "Prepaid Electricity City Power"
    assert all(t.source == "discovery" for t in transactions)


def test_failed_validation_returns_403_without_fetching(client, mail_service, sink):
    mail_service.authorized = False

    response = client.post("/budget-email", json=make_payload())

    assert response.status_code == 403
    body = response.json()
    assert body["title"] == "Forbidden"
    assert body["detail"] == "Not authorized"
    assert mail_service.fetch_calls == 0
    assert mail_service.delete_calls == 0
    assert sink.batches == []


def test_unreadable_validation_response_is_rejected(client, mail_service):
    mail_service.validation_body = "<html>oops</html>"

    response = client.post("/budget-email", json=make_payload())

    assert response.status_code == 403
    assert mail_service.fetch_calls == 0


def test_empty_attachments_returns_400_without_outbound_calls(client, mail_service):
    response = client.post("/budget-email", json=make_payload(attachments=[]))

    assert response.status_code == 400
    assert response.json()["detail"] == "No attachments found"
    assert mail_service.fetch_calls == 0
    assert mail_service.delete_calls == 0


def test_missing_attachments_field_returns_400(client, mail_service):
    payload = make_payload()
    del payload["attachments"]

    response = client.post("/budget-email", json=payload)

    assert response.status_code == 400
    assert mail_service.fetch_calls == 0


def test_unsupported_attachment_returns_400_after_deletion(client, mail_service, sink):
    response = client.post("/budget-email", json=make_payload("statement.pdf"))

    assert response.status_code == 400
    assert response.json()["detail"] == "Unsupported attachment type"
    assert mail_service.call_sequence == ["validate", "fetch", "delete"]
    assert sink.batches == []


def test_attachment_fetch_error_returns_502(client, mail_service):
    mail_service.attachment_status = 403

    response = client.post("/budget-email", json=make_payload())

    assert response.status_code == 502
    assert response.json()["title"] == "Bad Gateway"
    assert mail_service.delete_calls == 0


def test_unreachable_attachment_host_returns_502(client, mail_service):
    mail_service.fail_attachment_transport = True

    response = client.post("/budget-email", json=make_payload())

    assert response.status_code == 502


def test_deletion_failure_is_ignored(client, mail_service):
    mail_service.fail_deletion = True

    response = client.post("/budget-email", json=make_payload())

    assert response.status_code == 200
    assert mail_service.delete_calls == 1


def test_only_first_attachment_is_used(client, mail_service, sink):
    payload = make_payload()
    payload["attachments"].append(
        {"filename": "DiscoveryBank_other.csv", "url": "https://files.test/signed/other.csv"}
    )

    response = client.post("/budget-email", json=payload)

    assert response.status_code == 200
    assert mail_service.fetch_calls == 1
    assert sink.batches[0][0] == "account_statement_2024-07.csv"


def test_undated_capitec_rows_are_dropped(client, mail_service, sink):
    mail_service.attachment_body = (
        "Posting Date,Transaction Date,Description,Money In,Money Out,Fee\n"
        "2024-07-01,not a date,Broken,,-1.00,\n"
        "2024-07-01,2024-07-01 10:00:00,Fine,,-2.00,\n"
    )

    response = client.post("/budget-email", json=make_payload())

    assert response.status_code == 200
    assert response.json() == {"status": "processed"}
    (_, transactions) = sink.batches[0]
    assert [t.description for t in transactions] == ["Fine"]


def test_malformed_capitec_statement_returns_500(client, mail_service, sink):
    mail_service.attachment_body = (
        "Posting Date,Transaction Date,Description,Money In,Money Out,Fee\n"
        "2024-07-01,2024-07-01 09:00:00,Fine,,-2.00,\n"
        "2024-07-01,2024-07-01 10:00:00,Broken,,-1.00,,extra,fields\n"
    )

    response = client.post("/budget-email", json=make_payload())

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to parse statement"
    assert sink.batches == []


def test_invalid_body_returns_422(client, mail_service):
    response = client.post("/budget-email", json={"attachments": []})

    assert response.status_code == 422
    assert response.json()["title"] == "Unprocessable Entity"
    assert mail_service.requests == []


def test_request_id_is_echoed(client):
    response = client.post(
        "/budget-email",
        json=make_payload("statement.pdf"),
        headers={"X-Request-ID": "req-42"},
    )

    assert response.headers["X-Request-ID"] == "req-42"
    assert response.json()["request_id"] == "req-42"

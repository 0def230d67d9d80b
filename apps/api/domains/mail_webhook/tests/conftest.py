import pytest

from apps.api.domains.mail_webhook.tests.fakes import FakeMailService, RecordingSink


@pytest.fixture
def mail_service():
    return FakeMailService()


@pytest.fixture
def sink():
    return RecordingSink()

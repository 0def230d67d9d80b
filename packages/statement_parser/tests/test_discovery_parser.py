from datetime import datetime

from packages.statement_parser.discovery import parse_discovery_statement

CUTOFF = datetime(2024, 6, 24)

HEADER = "Value Date,Value Time,Type,Description,Beneficiary or CardHolder,Amount\n"


def test_sign_decides_type():
    csv_data = HEADER + (
        "2024-07-01,08:30:00,Card Purchase,Woolworths,J DOE,-350.00\n"
        '2024-07-02,09:00:00,Transfer,Salary,ACME,"1,500.00"\n'
    )
    transactions = parse_discovery_statement(csv_data, CUTOFF)

    assert len(transactions) == 2
    purchase, salary = transactions
    assert purchase.type == "expense"
    assert purchase.amount == -35000
    assert salary.type == "income"
    assert salary.amount == 150000
    assert all(t.source == "discovery" for t in transactions)


def test_value_date_and_time_are_combined():
    csv_data = HEADER + "2024-07-01,08:30:15,Card Purchase,Woolworths,J DOE,-350.00\n"
    (trx,) = parse_discovery_statement(csv_data, CUTOFF)
    assert trx.datetime == datetime(2024, 7, 1, 8, 30, 15)


def test_prepaid_electricity_prefixes_description():
    csv_data = HEADER + "2024-07-01,18:00:00,Prepaid Electricity,City Power,J DOE,-200.00\n"
    (trx,) = parse_discovery_statement(csv_data, CUTOFF)
    assert trx.description == "Prepaid Electricity City Power"
    assert trx.description.startswith("Prepaid Electricity ")


def test_other_types_keep_raw_description():
    csv_data = HEADER + "2024-07-01,18:00:00,Card Purchase,City Power,J DOE,-200.00\n"
    (trx,) = parse_discovery_statement(csv_data, CUTOFF)
    assert trx.description == "City Power"


def test_row_with_extra_fields_is_dropped():
    """One valid row plus one malformed row yields exactly one transaction."""
    csv_data = HEADER + (
        "2024-07-01,08:30:00,Card Purchase,Woolworths,J DOE,-350.00\n"
        "2024-07-02,09:00:00,Card Purchase,Pick n Pay,J DOE,-10.00,oops,extra\n"
    )
    transactions = parse_discovery_statement(csv_data, CUTOFF)

    assert len(transactions) == 1
    assert transactions[0].description == "Woolworths"


def test_truncated_row_is_dropped():
    csv_data = HEADER + (
        "2024-07-01,08:30:00,Card Purchase,Woolworths,J DOE,-350.00\n"
        "2024-07-02,09:00:00\n"
    )
    transactions = parse_discovery_statement(csv_data, CUTOFF)
    assert len(transactions) == 1


def test_unparseable_date_is_dropped():
    csv_data = HEADER + (
        "not-a-date,08:30:00,Card Purchase,Woolworths,J DOE,-350.00\n"
        "2024-07-02,09:00:00,Card Purchase,Spar,J DOE,-20.00\n"
    )
    transactions = parse_discovery_statement(csv_data, CUTOFF)
    assert [t.description for t in transactions] == ["Spar"]


def test_stray_quotes_inside_field_are_tolerated():
    csv_data = HEADER + '2024-07-01,12:00:00,Card Purchase,Joe\'s "Best" Pizza,J DOE,-120.00\n'
    (trx,) = parse_discovery_statement(csv_data, CUTOFF)
    assert trx.description == 'Joe\'s "Best" Pizza'


def test_cutoff_filter_applies():
    csv_data = HEADER + (
        "2024-06-24,00:00:00,Card Purchase,At cutoff,J DOE,-1.00\n"
        "2024-06-20,12:00:00,Card Purchase,Before,J DOE,-1.00\n"
        "2024-06-24,00:00:01,Card Purchase,After,J DOE,-1.00\n"
    )
    transactions = parse_discovery_statement(csv_data, CUTOFF)
    assert [t.description for t in transactions] == ["After"]

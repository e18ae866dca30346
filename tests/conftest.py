"""Pytest configuration and fixtures for the KassenBlick engine."""
from datetime import date

import pytest

from kassenblick.core.presenter import Presenter


class RecordingPresenter(Presenter):
    """Presenter that remembers every call instead of drawing."""

    def __init__(self):
        self.bill_batches = []
        self.bucket_batches = []
        self.redraws = 0

    def apply_bills(self, slots):
        self.bill_batches.append(list(slots))

    def apply_buckets(self, slots):
        self.bucket_batches.append(list(slots))

    def redraw(self):
        self.redraws += 1


class FixedClock:
    """Callable clock whose date tests can move."""

    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def clock():
    return FixedClock(date(2024, 2, 15))


@pytest.fixture
def bills_csv_content():
    """Bills file with friendly headers, as exported from the spreadsheet."""
    return (
        'StatusID,Name (tooltip),,Status,Account,Due Day,Autopay,Amount,Category,URL,Days Left\n'
        '1,Electricity,ELE,Unpaid,Checking,17,y,85.20,Utilities,https://power.example,2\n'
        '0,Rent,RNT,Paid,Checking,1,n,1200,Housing,,\n'
        '1,"Phone, mobile",PHN,Unpaid,Card,10,yes,45,Utilities,,\n'
        '1,Gym,GYM,Unpaid,Card,,n,30,Health,,\n'
    )


@pytest.fixture
def buckets_csv_content():
    return (
        'Source,Code,Baseline,Current,IR\n'
        'Car Loan,CAR,"$10,000.00","$4,000.00",4.5%\n'
        '(paid off loans below)\n'
        'Student Loan,,"$5,000.00","$5,000.00",3%\n'
        'Old Card,OLD,$0.00,$0.00,0%\n'
    )


@pytest.fixture
def bills_csv_file(bills_csv_content, tmp_path):
    csv_file = tmp_path / "Bills.csv"
    csv_file.write_text(bills_csv_content)
    return csv_file


@pytest.fixture
def buckets_csv_file(buckets_csv_content, tmp_path):
    csv_file = tmp_path / "Buckets.csv"
    csv_file.write_text(buckets_csv_content)
    return csv_file

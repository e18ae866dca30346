"""
Bill record and slot types.

- BillRecord: one decoded row of Bills.csv; every field is a string, blank when absent.
- BillSlot: render attributes for one grid position, handed to the presenter.
"""
from collections import namedtuple
from typing import Dict

from pydantic import BaseModel

BillRecord = namedtuple(
    "BillRecord",
    [
        "status_id",  # "0" marks the bill paid
        "name",       # tooltip name; rows without one are skipped
        "id",         # short label shown on the grid
        "status",     # "Paid" / "Unpaid"
        "account",
        "due_day",    # day of month 1-31
        "autopay",    # "y" / "yes" enables the green stroke
        "amount",
        "category",
        "url",
        "days_left",  # informational, not used for colours
    ],
    defaults=("",) * 11,
)

BLANK_BILL = BillRecord()

# Canonical header name -> BillRecord attribute
HEADER_FIELDS: Dict[str, str] = {
    "StatusID": "status_id",
    "Name": "name",
    "ID": "id",
    "Status": "status",
    "Account": "account",
    "DueDay": "due_day",
    "Autopay": "autopay",
    "Amount": "amount",
    "Category": "category",
    "URL": "url",
    "DaysLeft": "days_left",
}

# Columns the maintenance check requires in the header
CANONICAL_COLUMNS = ("StatusID", "Name", "ID", "Status", "Account", "DueDay", "Autopay", "Amount", "Category", "URL")

# Friendly header text -> canonical header name
HEADER_ALIASES: Dict[str, str] = {
    "": "ID",
    "Name (tooltip)": "Name",
    "Due Day": "DueDay",
    "Days Left": "DaysLeft",
}


def is_blank(bill: BillRecord) -> bool:
    """Placeholder slot: no name and no id."""
    return not bill.name and not bill.id


def is_settled(bill: BillRecord) -> bool:
    return bill.status_id == "0" or bill.status.lower() == "paid"


def is_autopay(bill: BillRecord) -> bool:
    return bill.autopay.lower() in ("y", "yes")


class BillSlot(BaseModel):
    """Render attributes for one bill grid position (1-based index)."""

    index: int
    row: int
    col: int
    fill: str
    stroke: str
    label: str = "---"
    tooltip: str = ""

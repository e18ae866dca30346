"""
Bill status colours and tooltip text.

Fill:   GREEN paid, RED due today or overdue, YELLOW within the threshold,
        GREY otherwise or when the due day is unknown, BLACK for empty slots.
Stroke: GREEN when autopay is enabled, WHITE otherwise.
"""
import math
from collections import namedtuple
from datetime import date
from typing import List, Optional

from kassenblick.core.colors import COLOR
from kassenblick.core.dates import DateLike, days_until_due
from kassenblick.plugins.bills.models import BillRecord, BillSlot, is_autopay, is_blank, is_settled

YELLOW_THRESHOLD = 5
COLUMNS = 3

BillStatus = namedtuple("BillStatus", ["fill", "stroke", "tooltip"])


def days_text(days: Optional[int]) -> str:
    if days is None:
        return "Unknown"
    if days < 0:
        return f"OVERDUE ({abs(days)}d)"
    if days == 0:
        return "DUE TODAY"
    return f"Due in {days}d"


def fill_color(days: Optional[int], yellow_threshold: int = YELLOW_THRESHOLD) -> str:
    if days is None:
        return COLOR.GREY
    if days <= 0:
        return COLOR.RED
    if days <= yellow_threshold:
        return COLOR.YELLOW
    return COLOR.GREY


def tooltip_text(bill: BillRecord, days: Optional[int]) -> str:
    if not bill.name:
        return ""
    text = f"{bill.name} | ${bill.amount} | {days_text(days)}"
    if is_autopay(bill):
        text += " | AUTO"
    return text


def classify(
    bill: BillRecord,
    today: Optional[DateLike] = None,
    yellow_threshold: int = YELLOW_THRESHOLD,
) -> BillStatus:
    """Derive fill, stroke and tooltip for one bill. Paid takes precedence over the due date."""
    if is_blank(bill):
        return BillStatus(COLOR.BLACK, COLOR.WHITE, "")

    stroke = COLOR.GREEN if is_autopay(bill) else COLOR.WHITE
    days = days_until_due(bill.due_day, today or date.today())

    if is_settled(bill):
        fill = COLOR.GREEN
    else:
        fill = fill_color(days, yellow_threshold)

    return BillStatus(fill, stroke, tooltip_text(bill, days))


def slot_position(index: int, columns: int = COLUMNS) -> tuple:
    """(row, col) for a 1-based slot index, filling rows left to right."""
    return math.ceil(index / columns), ((index - 1) % columns) + 1


def build_slots(
    bills: List[BillRecord],
    today: Optional[DateLike] = None,
    columns: int = COLUMNS,
    yellow_threshold: int = YELLOW_THRESHOLD,
) -> List[BillSlot]:
    today = today or date.today()
    slots = []
    for index, bill in enumerate(bills, start=1):
        status = classify(bill, today, yellow_threshold)
        row, col = slot_position(index, columns)
        slots.append(
            BillSlot(
                index=index,
                row=row,
                col=col,
                fill=status.fill,
                stroke=status.stroke,
                label=bill.id or "---",
                tooltip=status.tooltip,
            )
        )
    return slots

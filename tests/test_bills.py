"""Tests for bills decoding and status classification."""
from datetime import date

import pytest

from kassenblick.core.colors import COLOR
from kassenblick.plugins.bills.models import BLANK_BILL, BillRecord
from kassenblick.plugins.bills.service import MAX_BILLS, decode_bills, decode_bills_text
from kassenblick.plugins.bills.status import build_slots, classify, slot_position

TODAY = date(2024, 2, 15)


class TestDecodeBills:
    """Test cases for decode_bills_text / decode_bills."""

    def test_aliased_headers(self, bills_csv_content):
        """Test that friendly headers map onto canonical fields."""
        bills = decode_bills_text(bills_csv_content)

        electricity = bills[0]
        assert electricity.name == "Electricity"
        assert electricity.id == "ELE"
        assert electricity.due_day == "17"
        assert electricity.autopay == "y"
        assert electricity.amount == "85.20"
        assert electricity.url == "https://power.example"
        assert electricity.days_left == "2"

    def test_quoted_value_with_comma(self, bills_csv_content):
        bills = decode_bills_text(bills_csv_content)
        assert bills[2].name == "Phone, mobile"
        assert bills[2].id == "PHN"

    def test_always_max_bills(self, bills_csv_content):
        """Test that the collection is padded to exactly MAX_BILLS."""
        bills = decode_bills_text(bills_csv_content)
        assert len(bills) == MAX_BILLS
        assert [b.name for b in bills[:4]] == ["Electricity", "Rent", "Phone, mobile", "Gym"]
        assert all(b == BLANK_BILL for b in bills[4:])

    def test_empty_text(self):
        bills = decode_bills_text("")
        assert len(bills) == MAX_BILLS
        assert all(b == BLANK_BILL for b in bills)

    def test_header_only(self):
        bills = decode_bills_text("StatusID,Name,ID\n")
        assert len(bills) == MAX_BILLS
        assert all(b == BLANK_BILL for b in bills)

    def test_more_rows_than_capacity(self):
        """Test that rows beyond the cap are ignored."""
        rows = [f"1,Bill {i},B{i}" for i in range(1, 21)]
        text = "StatusID,Name,ID\n" + "\n".join(rows) + "\n"
        bills = decode_bills_text(text)
        assert len(bills) == MAX_BILLS
        assert bills[0].name == "Bill 1"
        assert bills[-1].name == "Bill 15"

    def test_custom_capacity(self):
        text = "Name\nA\nB\nC\n"
        bills = decode_bills_text(text, max_bills=2)
        assert [b.name for b in bills] == ["A", "B"]

    def test_rows_without_name_are_skipped(self):
        text = "StatusID,Name,ID\n1,,X\n1,Water,WAT\n\n"
        bills = decode_bills_text(text)
        assert bills[0].name == "Water"
        assert bills[1] == BLANK_BILL

    def test_short_row_defaults_to_blank(self):
        """Test that missing trailing fields become empty strings."""
        text = "Name,ID,DueDay,Autopay\nInternet,NET\n"
        bill = decode_bills_text(text)[0]
        assert bill.name == "Internet"
        assert bill.id == "NET"
        assert bill.due_day == ""
        assert bill.autopay == ""

    def test_missing_canonical_columns_default(self):
        bill = decode_bills_text("Name\nInternet\n")[0]
        assert bill.status_id == ""
        assert bill.category == ""

    def test_values_and_headers_are_trimmed(self):
        text = ' Name , ID \n  Water  , " WAT " \n'
        bill = decode_bills_text(text)[0]
        assert bill.name == "Water"
        assert bill.id == "WAT"

    def test_unknown_headers_ignored(self):
        bill = decode_bills_text("Name,Notes\nWater,call first\n")[0]
        assert bill.name == "Water"

    def test_without_aliases_friendly_name_is_not_recognised(self, bills_csv_content):
        """Test the simpler engine: raw headers only, so no row has a Name."""
        bills = decode_bills_text(bills_csv_content, aliases=None)
        assert all(b == BLANK_BILL for b in bills)

    def test_bom_is_ignored(self, tmp_path):
        csv_file = tmp_path / "Bills.csv"
        csv_file.write_bytes("\ufeffName,ID\r\nWater,WAT\r\n".encode("utf-8"))
        bills = decode_bills(csv_file)
        assert bills[0].name == "Water"
        assert bills[0].id == "WAT"

    def test_missing_file_keeps_previous(self, tmp_path, caplog):
        """Test that an unreadable file leaves the previous collection untouched."""
        previous = [BillRecord(name="Kept")] + [BLANK_BILL] * (MAX_BILLS - 1)
        with caplog.at_level("ERROR"):
            bills = decode_bills(tmp_path / "missing.csv", previous=previous)
        assert bills is previous
        assert "Cannot open" in caplog.text

    def test_missing_file_without_previous(self, tmp_path):
        bills = decode_bills(tmp_path / "missing.csv")
        assert len(bills) == MAX_BILLS
        assert all(b == BLANK_BILL for b in bills)


class TestClassify:
    """Test cases for classify."""

    def test_blank_slot(self):
        status = classify(BLANK_BILL, TODAY)
        assert status == (COLOR.BLACK, COLOR.WHITE, "")

    def test_paid_overrides_overdue(self):
        """Test that StatusID 0 is green even when the due day has passed."""
        bill = BillRecord(name="Rent", id="RNT", status_id="0", due_day="1", amount="1200")
        status = classify(bill, TODAY)
        assert status.fill == COLOR.GREEN
        assert status.stroke == COLOR.WHITE
        assert status.tooltip == "Rent | $1200 | OVERDUE (14d)"

    def test_status_text_paid_any_case(self):
        bill = BillRecord(name="Rent", status="PAID", due_day="15")
        assert classify(bill, TODAY).fill == COLOR.GREEN

    def test_status_id_must_be_textual_zero(self):
        bill = BillRecord(name="Rent", status_id="00", due_day="25")
        assert classify(bill, TODAY).fill == COLOR.GREY

    @pytest.mark.parametrize(
        "due_day, expected_fill, expected_text",
        [
            ("10", COLOR.RED, "OVERDUE (5d)"),
            ("15", COLOR.RED, "DUE TODAY"),
            ("16", COLOR.YELLOW, "Due in 1d"),
            ("20", COLOR.YELLOW, "Due in 5d"),
            ("21", COLOR.GREY, "Due in 6d"),
            ("31", COLOR.GREY, "Due in 14d"),
            ("", COLOR.GREY, "Unknown"),
            ("abc", COLOR.GREY, "Unknown"),
            ("40", COLOR.GREY, "Unknown"),
        ],
    )
    def test_due_day_colours(self, due_day, expected_fill, expected_text):
        bill = BillRecord(name="Water", id="WAT", due_day=due_day, amount="40")
        status = classify(bill, TODAY)
        assert status.fill == expected_fill
        assert status.tooltip == f"Water | $40 | {expected_text}"

    @pytest.mark.parametrize("flag", ["y", "Y", "yes", "YES"])
    def test_autopay_stroke_and_suffix(self, flag):
        bill = BillRecord(name="Water", due_day="", amount="40", autopay=flag)
        status = classify(bill, TODAY)
        assert status.stroke == COLOR.GREEN
        assert status.tooltip == "Water | $40 | Unknown | AUTO"

    @pytest.mark.parametrize("flag", ["", "n", "no", "true"])
    def test_no_autopay(self, flag):
        bill = BillRecord(name="Water", autopay=flag)
        status = classify(bill, TODAY)
        assert status.stroke == COLOR.WHITE
        assert not status.tooltip.endswith("AUTO")

    def test_id_only_bill_is_not_blank(self):
        """Test that a record with an id but no name is coloured but has no tooltip."""
        bill = BillRecord(id="WAT", due_day="16")
        status = classify(bill, TODAY)
        assert status.fill == COLOR.YELLOW
        assert status.tooltip == ""

    def test_custom_yellow_threshold(self):
        bill = BillRecord(name="Water", due_day="25")
        assert classify(bill, TODAY, yellow_threshold=10).fill == COLOR.YELLOW


class TestBuildSlots:
    """Test cases for grid slot addressing."""

    @pytest.mark.parametrize(
        "index, expected",
        [(1, (1, 1)), (2, (1, 2)), (3, (1, 3)), (4, (2, 1)), (14, (5, 2)), (15, (5, 3))],
    )
    def test_slot_position(self, index, expected):
        assert slot_position(index) == expected

    def test_slots_from_file(self, bills_csv_content):
        slots = build_slots(decode_bills_text(bills_csv_content), TODAY)
        assert len(slots) == MAX_BILLS

        electricity, rent, phone, gym = slots[:4]
        assert (electricity.fill, electricity.stroke, electricity.label) == (COLOR.YELLOW, COLOR.GREEN, "ELE")
        assert electricity.tooltip == "Electricity | $85.20 | Due in 2d | AUTO"
        assert rent.fill == COLOR.GREEN
        assert phone.fill == COLOR.RED
        assert phone.tooltip == "Phone, mobile | $45 | OVERDUE (5d) | AUTO"
        assert gym.fill == COLOR.GREY
        assert gym.tooltip == "Gym | $30 | Unknown"
        assert (gym.row, gym.col) == (2, 1)

        empty = slots[-1]
        assert (empty.fill, empty.stroke, empty.label, empty.tooltip) == (COLOR.BLACK, COLOR.WHITE, "---", "")
        assert (empty.row, empty.col) == (5, 3)

"""
Decode Bills.csv into a fixed-size list of BillRecord.

The header row names the columns (optionally through HEADER_ALIASES); each data row is
zipped positionally with it. Rows without a Name are skipped and the result is padded
with blank records to exactly max_bills entries.
"""
import logging
from typing import Dict, List, Optional

from kassenblick.core.csv_line import parse_line
from kassenblick.core.sources import PathLike, SourceUnavailableError, read_source
from kassenblick.plugins.bills.models import BLANK_BILL, HEADER_ALIASES, HEADER_FIELDS, BillRecord

logger = logging.getLogger("KassenBlick.bills")

MAX_BILLS = 15


def clean_value(value: Optional[str]) -> str:
    """Trim whitespace and one layer of surrounding quotes."""
    return (value or "").strip().strip('"').strip()


def normalize_headers(header_line: str, aliases: Optional[Dict[str, str]] = HEADER_ALIASES) -> List[str]:
    """Parse the header row into canonical names. aliases=None keeps the raw trimmed names."""
    headers = []
    for token in parse_line(header_line):
        key = clean_value(token)
        if aliases:
            key = aliases.get(key, key)
        headers.append(key)
    return headers


def build_record(headers: List[str], fields: List[str]) -> BillRecord:
    """Zip header names to field values; missing fields are blank, unknown headers ignored."""
    values: Dict[str, str] = {}
    for i, header in enumerate(headers):
        attr = HEADER_FIELDS.get(header)
        if attr is None:
            continue
        values[attr] = clean_value(fields[i]) if i < len(fields) else ""
    return BillRecord(**values)


def pad_bills(bills: List[BillRecord], max_bills: int = MAX_BILLS) -> List[BillRecord]:
    bills = list(bills[:max_bills])
    while len(bills) < max_bills:
        bills.append(BLANK_BILL)
    return bills


def decode_bills_text(
    text: str,
    max_bills: int = MAX_BILLS,
    aliases: Optional[Dict[str, str]] = HEADER_ALIASES,
) -> List[BillRecord]:
    """Decode CSV text into exactly max_bills records (real rows first, then blanks)."""
    lines = text.splitlines()
    if not lines:
        return pad_bills([], max_bills)

    headers = normalize_headers(lines[0], aliases)
    bills: List[BillRecord] = []
    for data_lines, line in enumerate(lines[1:], start=1):
        if data_lines > max_bills:
            break
        bill = build_record(headers, parse_line(line))
        if not bill.name:
            logger.debug(f"Skipping bill row {data_lines}: no name")
            continue
        bills.append(bill)

    return pad_bills(bills, max_bills)


def decode_bills(
    path: PathLike,
    previous: Optional[List[BillRecord]] = None,
    max_bills: int = MAX_BILLS,
    aliases: Optional[Dict[str, str]] = HEADER_ALIASES,
) -> List[BillRecord]:
    """
    Read and decode the bills file. When the file cannot be read the previous
    collection is returned untouched (all blanks if there is none).
    """
    try:
        text = read_source(path)
    except SourceUnavailableError as e:
        logger.error(str(e))
        if previous is not None:
            return previous
        return pad_bills([], max_bills)
    return decode_bills_text(text, max_bills=max_bills, aliases=aliases)

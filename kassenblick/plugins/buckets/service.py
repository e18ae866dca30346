"""
Decode Buckets.csv: positional columns Source, Code, Baseline, Current, IR.
Header, note and blank rows are skipped; buckets without a positive baseline are dropped.
"""
import logging
import math
import re
from typing import List, Optional

from kassenblick.core.csv_line import parse_line
from kassenblick.core.sources import PathLike, SourceUnavailableError, read_source
from kassenblick.plugins.buckets.models import BucketRecord

logger = logging.getLogger("KassenBlick.buckets")

MAX_BUCKETS = 5

_MONEY_STRIP_RE = re.compile(r"[\s$,]")
# Plain ASCII decimals only: no exponent, underscores, nan or inf
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)", re.ASCII)


def parse_number(value: Optional[str], strip_percent: bool = False) -> float:
    """Parse "$1,234.50" / "4.5%" style values; anything unparsable is 0."""
    text = _MONEY_STRIP_RE.sub("", (value or "").strip().strip('"'))
    if strip_percent:
        text = text.rstrip("%")
    if not text:
        return 0.0
    result = float(text) if _NUMBER_RE.fullmatch(text) else math.nan
    if not math.isfinite(result):
        logger.debug(f"Malformed number {value!r}, using 0")
        return 0.0
    return result


def is_noise_row(fields: List[str]) -> bool:
    """Header, blank and "(...)" note rows carry no bucket."""
    first = fields[0].strip().strip('"').strip() if fields else ""
    return not first or first == "Source" or first.startswith("(")


def build_bucket(fields: List[str]) -> BucketRecord:
    def field(i: int) -> str:
        return fields[i].strip().strip('"').strip() if i < len(fields) else ""

    source = field(0)
    code = field(1) or source[:3].upper()
    return BucketRecord(
        source=source,
        code=code,
        baseline=parse_number(field(2)),
        current=parse_number(field(3)),
        ir=parse_number(field(4), strip_percent=True),
    )


def decode_buckets_text(text: str, max_buckets: int = MAX_BUCKETS) -> List[BucketRecord]:
    """Decode CSV text into at most max_buckets records, in file order."""
    buckets: List[BucketRecord] = []
    for line in text.splitlines():
        if len(buckets) >= max_buckets:
            break
        fields = parse_line(line)
        if is_noise_row(fields):
            continue
        bucket = build_bucket(fields)
        if bucket.baseline <= 0:
            logger.debug(f"Dropping bucket {bucket.source!r}: baseline {bucket.baseline}")
            continue
        buckets.append(bucket)
    return buckets


def decode_buckets(
    path: PathLike,
    previous: Optional[List[BucketRecord]] = None,
    max_buckets: int = MAX_BUCKETS,
) -> List[BucketRecord]:
    """Read and decode the buckets file; on read failure keep the previous list."""
    try:
        text = read_source(path)
    except SourceUnavailableError as e:
        logger.error(str(e))
        return previous if previous is not None else []
    return decode_buckets_text(text, max_buckets=max_buckets)

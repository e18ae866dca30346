"""
Bills.csv upkeep: header validation and the monthly reset of paid bills.

The reset rewrites StatusID "0" -> "1" and Status "Paid" -> "Unpaid" on data rows only;
every other line is written back unchanged. The refresh loop picks the rewrite up as an
ordinary content change on its next tick.
"""
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from kassenblick.core.csv_line import format_line, parse_line
from kassenblick.core.sources import read_source, write_source
from kassenblick.core.task import BaseTask, TaskType
from .models import CANONICAL_COLUMNS, HEADER_ALIASES
from .service import normalize_headers


def missing_columns(text: str, aliases: Optional[Dict[str, str]] = HEADER_ALIASES) -> List[str]:
    """Canonical columns absent from the header row, in canonical order."""
    lines = text.splitlines()
    headers = set(normalize_headers(lines[0], aliases)) if lines else set()
    return [column for column in CANONICAL_COLUMNS if column not in headers]


def _split_ending(line: str) -> Tuple[str, str]:
    body = line.rstrip("\r\n")
    return body, line[len(body):]


def reset_statuses(text: str, aliases: Optional[Dict[str, str]] = HEADER_ALIASES) -> Tuple[str, int]:
    """Mark every paid bill unpaid. Returns the new text and the number of rows changed."""
    lines = text.splitlines(keepends=True)
    if not lines:
        return text, 0

    headers = normalize_headers(lines[0], aliases)
    status_id_col = headers.index("StatusID") if "StatusID" in headers else None
    status_col = headers.index("Status") if "Status" in headers else None

    out = [lines[0]]
    changed = 0
    for line in lines[1:]:
        body, ending = _split_ending(line)
        fields = parse_line(body)
        touched = False
        if status_id_col is not None and status_id_col < len(fields) and fields[status_id_col].strip() == "0":
            fields[status_id_col] = "1"
            touched = True
        if status_col is not None and status_col < len(fields) and fields[status_col].strip().lower() == "paid":
            fields[status_col] = "Unpaid"
            touched = True
        if touched:
            changed += 1
            out.append(format_line(fields) + ending)
        else:
            out.append(line)
    return "".join(out), changed


class BillsMaintenanceTask(BaseTask):
    """Monthly: validate the Bills.csv header, then reset paid statuses."""

    def __init__(self, source_path: Path, config: Optional[Dict[str, Any]] = None):
        config = config or {}
        schedule_config = {"day": config.get("day", 1), "time": config.get("time", "00:05")}
        super().__init__("Bills maintenance", TaskType.MONTHLY, schedule_config)
        self.source_path = Path(source_path)
        self.reset_enabled = config.get("reset_statuses", True)
        self.aliases = HEADER_ALIASES if config.get("use_aliases", True) else None

    def validate(self) -> List[str]:
        """Return missing canonical columns (empty when the header is complete)."""
        missing = missing_columns(read_source(self.source_path), self.aliases)
        if missing:
            self.logger.error(f"{self.source_path.name} is missing columns: {', '.join(missing)}")
        else:
            self.logger.info(f"{self.source_path.name} header OK")
        return missing

    def reset(self) -> int:
        text = read_source(self.source_path)
        new_text, changed = reset_statuses(text, self.aliases)
        if changed:
            write_source(self.source_path, new_text)
        self.logger.info(f"Reset {changed} paid bills in {self.source_path.name}")
        return changed

    def run(self, **kwargs: Any) -> None:
        if self.validate():
            return
        if self.reset_enabled:
            self.reset()

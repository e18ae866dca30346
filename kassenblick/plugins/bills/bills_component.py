"""
Bills component: 5x3 grid of status dots driven by Bills.csv.
"""
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from kassenblick.core.component_base import StatusComponent
from kassenblick.core.presenter import Presenter
from .models import HEADER_ALIASES, BillRecord, BillSlot
from .service import MAX_BILLS, decode_bills_text, pad_bills
from .status import COLUMNS, YELLOW_THRESHOLD, build_slots


class BillsComponent(StatusComponent):
    name = "Bills"

    def __init__(self, config: Dict[str, Any], source_path: Path, clock: Optional[Callable[[], date]] = None):
        super().__init__(config, source_path, clock)
        self.max_bills = int(config.get("max_bills", MAX_BILLS))
        self.columns = int(config.get("columns", COLUMNS))
        self.yellow_threshold = int(config.get("yellow_threshold", YELLOW_THRESHOLD))
        self.aliases = HEADER_ALIASES if config.get("use_aliases", True) else None
        self.bills: List[BillRecord] = pad_bills([], self.max_bills)
        self.slots: List[BillSlot] = []
        self.derived_on: Optional[date] = None

    def needs_refresh(self, content: str) -> bool:
        # Colours depend on today's date as well as on the file
        return super().needs_refresh(content) or self.derived_on != self.clock()

    def load(self, content: str) -> None:
        today = self.clock()
        self.bills = decode_bills_text(content, max_bills=self.max_bills, aliases=self.aliases)
        self.slots = build_slots(
            self.bills,
            today,
            columns=self.columns,
            yellow_threshold=self.yellow_threshold,
        )
        self.derived_on = today
        self.logger.info(f"Bills: {sum(1 for b in self.bills if b.name)} of {self.max_bills} slots filled")

    def apply(self, presenter: Presenter) -> None:
        presenter.apply_bills(self.slots)

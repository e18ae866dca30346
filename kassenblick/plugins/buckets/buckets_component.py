"""
Buckets component: one partial pie per budget bucket, driven by Buckets.csv.
"""
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from kassenblick.core.component_base import StatusComponent
from kassenblick.core.presenter import Presenter
from .geometry import aggregate
from .models import BucketRecord, BucketSlot
from .service import MAX_BUCKETS, decode_buckets_text


class BucketsComponent(StatusComponent):
    name = "Buckets"

    def __init__(self, config: Dict[str, Any], source_path: Path, clock: Optional[Callable[[], date]] = None):
        super().__init__(config, source_path, clock)
        self.max_buckets = int(config.get("max_buckets", MAX_BUCKETS))
        self.buckets: List[BucketRecord] = []
        self.max_baseline = 0.0
        self.slots: List[BucketSlot] = []

    def load(self, content: str) -> None:
        self.buckets = decode_buckets_text(content, max_buckets=self.max_buckets)
        self.max_baseline, self.slots = aggregate(self.buckets, self.max_buckets)
        self.logger.info(f"Buckets: {len(self.buckets)} of {self.max_buckets} slots filled")

    def apply(self, presenter: Presenter) -> None:
        presenter.apply_buckets(self.slots)

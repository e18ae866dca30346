"""
Budget bucket record and slot types.
"""
from collections import namedtuple

from pydantic import BaseModel

BucketRecord = namedtuple(
    "BucketRecord",
    [
        "source",    # display name
        "code",      # short label
        "baseline",  # original amount, > 0
        "current",   # amount still remaining
        "ir",        # interest rate in percent
    ],
    defaults=("", "", 0.0, 0.0, 0.0),
)


class BucketSlot(BaseModel):
    """Render attributes for one bucket pie. radius == 0 means an empty slot."""

    index: int
    label: str = ""
    tooltip: str = ""
    radius: int = 0
    green_percent: float = 0.0
    display_percent: float = 0.0
    arc_end_x: float = 0.0
    arc_end_y: float = 0.0
    large_arc_flag: int = 0
    ring_thickness: float = 0.0
    ring_color: str = ""

    @property
    def is_empty(self) -> bool:
        return self.radius <= 0

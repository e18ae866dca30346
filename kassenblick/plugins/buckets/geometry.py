"""
Partial-pie geometry for budget buckets.

Each bucket is a circle whose radius scales with its baseline relative to the largest
baseline. A green wedge starting at 12 o'clock and sweeping clockwise shows the paid-off
share; a ring around it shows the interest rate.
"""
import math
from collections import namedtuple
from typing import List

from kassenblick.core.colors import COLOR
from kassenblick.plugins.buckets.models import BucketRecord, BucketSlot
from kassenblick.plugins.buckets.service import MAX_BUCKETS

MAX_RADIUS = 50
MIN_RADIUS = 15
MIN_DISPLAY_PERCENT = 3.0
IR_RING_SCALE = 3.0
RING_COLOR = COLOR.ORANGE

Aggregation = namedtuple("Aggregation", ["max_baseline", "slots"])


def fmt_money(value: float) -> str:
    return f"{value:,.2f}"


def green_percent(bucket: BucketRecord) -> float:
    """Paid-off share of the baseline in percent (not clamped)."""
    if bucket.baseline <= 0:
        return 0.0
    return (bucket.baseline - bucket.current) / bucket.baseline * 100


def bucket_radius(baseline: float, max_baseline: float) -> int:
    if max_baseline <= 0 or baseline <= 0:
        return 0
    return max(MIN_RADIUS, math.floor(MAX_RADIUS * baseline / max_baseline))


def display_percent(percent: float) -> float:
    """Percent used for the drawn wedge: a sliver when anything is paid, never over a full circle."""
    if percent <= 0:
        return 0.0
    return min(100.0, max(MIN_DISPLAY_PERCENT, percent))


def arc_end(radius: float, percent: float) -> tuple:
    """End point of the clockwise arc from 12 o'clock, relative to the circle centre."""
    angle = math.radians(percent / 100 * 360)
    return radius * math.sin(angle), -radius * math.cos(angle)


def large_arc_flag(percent: float) -> int:
    return 1 if percent > 50 else 0


def ring_thickness(ir: float) -> float:
    return ir / IR_RING_SCALE


def bucket_tooltip(bucket: BucketRecord, percent: float) -> str:
    paid = max(0.0, bucket.baseline - bucket.current)
    return (
        f"{bucket.source} | Baseline: ${fmt_money(bucket.baseline)}"
        f" | Current: ${fmt_money(bucket.current)}"
        f" | Paid: ${fmt_money(paid)} ({percent:.0f}%)"
    )


def build_slot(index: int, bucket: BucketRecord, max_baseline: float) -> BucketSlot:
    radius = bucket_radius(bucket.baseline, max_baseline)
    if radius == 0:
        return BucketSlot(index=index)

    percent = green_percent(bucket)
    shown = display_percent(percent)
    end_x, end_y = arc_end(radius, shown)
    return BucketSlot(
        index=index,
        label=bucket.code,
        tooltip=bucket_tooltip(bucket, percent),
        radius=radius,
        green_percent=percent,
        display_percent=shown,
        arc_end_x=end_x,
        arc_end_y=end_y,
        large_arc_flag=large_arc_flag(shown),
        ring_thickness=ring_thickness(bucket.ir),
        ring_color=RING_COLOR,
    )


def aggregate(buckets: List[BucketRecord], max_buckets: int = MAX_BUCKETS) -> Aggregation:
    """Slots for every bucket position; positions past the decoded buckets are empty."""
    buckets = list(buckets[:max_buckets])
    max_baseline = max((b.baseline for b in buckets), default=0.0)
    slots = [build_slot(i, bucket, max_baseline) for i, bucket in enumerate(buckets, start=1)]
    for index in range(len(slots) + 1, max_buckets + 1):
        slots.append(BucketSlot(index=index))
    return Aggregation(max_baseline, slots)

"""
Presentation sinks. The engine never draws; it hands slots to a Presenter.

- SkinPresenter: turns slots into skin commands ("!SetOption", meter, option, value) and "!Redraw".
- JsonStatePresenter: writes all slots to a JSON state file on redraw for hosts that poll a file.
"""
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from kassenblick.core.colors import COLOR
from kassenblick.core.sources import write_source

logger = logging.getLogger("KassenBlick.presenter")

# Bucket pies are drawn around a fixed local centre that fits the largest radius plus its ring
BUCKET_CENTER = 60


class Presenter(ABC):
    """Receives derived render attributes. Slots are pydantic BillSlot / BucketSlot models."""

    @abstractmethod
    def apply_bills(self, slots: List[Any]) -> None:
        pass

    @abstractmethod
    def apply_buckets(self, slots: List[Any]) -> None:
        pass

    @abstractmethod
    def redraw(self) -> None:
        pass


def _log_bang(*args: str) -> None:
    logger.debug("Bang " + " ".join(repr(a) for a in args))


def bill_meter_suffix(slot) -> str:
    return f"R{slot.row}_C{slot.col}"


def bill_dot_shape(slot) -> str:
    return f"Ellipse 5,5,5,5 | Fill Color {slot.fill} | StrokeWidth 1 | Stroke Color {slot.stroke}"


def bucket_base_shape(slot, cx: int = BUCKET_CENTER) -> str:
    if slot.is_empty:
        return ""
    return f"Ellipse {cx},{cx},{slot.radius},{slot.radius} | Fill Color {COLOR.GREY} | StrokeWidth 0"


def bucket_arc_shape(slot, cx: int = BUCKET_CENTER) -> str:
    if slot.is_empty or slot.display_percent <= 0:
        return ""
    if slot.display_percent >= 100:
        # Start and end point coincide; a path arc would collapse to nothing
        return f"Ellipse {cx},{cx},{slot.radius},{slot.radius} | Fill Color {COLOR.GREEN} | StrokeWidth 0"
    return f"Path GreenArc | Fill Color {COLOR.GREEN} | StrokeWidth 0"


def bucket_arc_path(slot, cx: int = BUCKET_CENTER) -> str:
    """Wedge path: centre, 12 o'clock, clockwise arc to the end point, back to centre."""
    if slot.is_empty or slot.display_percent <= 0 or slot.display_percent >= 100:
        return ""
    end_x = cx + slot.arc_end_x
    end_y = cx + slot.arc_end_y
    return (
        f"{cx},{cx} | LineTo {cx},{cx - slot.radius}"
        f" | ArcTo {end_x:.2f},{end_y:.2f},{slot.radius},{slot.radius},0,0,{slot.large_arc_flag}"
        f" | ClosePath 1"
    )


def bucket_ring_shape(slot, cx: int = BUCKET_CENTER) -> str:
    if slot.is_empty or slot.ring_thickness <= 0:
        return ""
    return (
        f"Ellipse {cx},{cx},{slot.radius},{slot.radius} | Fill Color {COLOR.TRANSPARENT}"
        f" | StrokeWidth {slot.ring_thickness:.2f} | Stroke Color {slot.ring_color}"
    )


class SkinPresenter(Presenter):
    """Applies slots to skin meters through a bang callable (defaults to logging)."""

    def __init__(self, bang: Optional[Callable[..., None]] = None):
        self.bang = bang or _log_bang

    def set_option(self, meter: str, option: str, value: str) -> None:
        self.bang("!SetOption", meter, option, value)

    def apply_bills(self, slots: List[Any]) -> None:
        for slot in slots:
            suffix = bill_meter_suffix(slot)
            dot_meter = f"MeterDot_{suffix}"
            id_meter = f"MeterID_{suffix}"
            self.set_option(dot_meter, "Shape", bill_dot_shape(slot))
            self.set_option(id_meter, "Text", slot.label)
            self.set_option(dot_meter, "ToolTipText", slot.tooltip)
            self.set_option(id_meter, "ToolTipText", slot.tooltip)

    def apply_buckets(self, slots: List[Any]) -> None:
        for slot in slots:
            meter = f"MeterBucket{slot.index}"
            label_meter = f"MeterBucketLabel{slot.index}"
            self.set_option(meter, "Shape", bucket_base_shape(slot))
            self.set_option(meter, "Shape2", bucket_arc_shape(slot))
            self.set_option(meter, "GreenArc", bucket_arc_path(slot))
            self.set_option(meter, "Shape3", bucket_ring_shape(slot))
            self.set_option(meter, "ToolTipText", slot.tooltip)
            self.set_option(label_meter, "Text", slot.label)
            self.set_option(label_meter, "ToolTipText", slot.tooltip)

    def redraw(self) -> None:
        self.bang("!Redraw")


class JsonStatePresenter(Presenter):
    """Keeps the latest slots and writes them to a JSON file on redraw."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.state: Dict[str, List[Dict[str, Any]]] = {"bills": [], "buckets": []}

    def apply_bills(self, slots: List[Any]) -> None:
        self.state["bills"] = [slot.model_dump() for slot in slots]

    def apply_buckets(self, slots: List[Any]) -> None:
        self.state["buckets"] = [slot.model_dump() for slot in slots]

    def redraw(self) -> None:
        try:
            write_source(self.path, json.dumps(self.state, indent=2))
        except OSError as e:
            logger.error(f"Cannot write state file {self.path}: {e}")


def create_presenter(presenter_config: Optional[Dict[str, Any]], resolve_path: Callable[[str], Path]) -> Presenter:
    """Factory: build the presenter named by config['type'] (skin or json)."""
    presenter_config = presenter_config or {}
    presenter_type = (presenter_config.get("type") or "skin").lower()
    if presenter_type == "json":
        path = resolve_path(presenter_config.get("path", "kassenblick_state.json"))
        logger.info(f"Writing render state to {path}")
        return JsonStatePresenter(path)
    if presenter_type != "skin":
        logger.warning(f"Unknown presenter type {presenter_type!r}, using skin")
    return SkinPresenter()

from abc import ABC, abstractmethod
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, Optional
import logging

from .presenter import Presenter
from .sources import read_source


class StatusComponent(ABC):
    """
    One refresh track: a CSV source, its decoded records and the slots derived from them.
    The orchestrator calls read_source(), needs_refresh(), load() and apply() once per tick.
    """

    def __init__(self, config: Dict[str, Any], source_path: Path, clock: Optional[Callable[[], date]] = None):
        self.config = config
        self.source_path = Path(source_path)
        self.clock = clock or date.today
        self.logger = logging.getLogger(f"KassenBlick.{self.name}")
        self.last_seen_content: Optional[str] = None
        self.source_available = True

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of the component"""
        pass

    def read_source(self) -> str:
        """Read the current source text. Raises SourceUnavailableError."""
        return read_source(self.source_path)

    def needs_refresh(self, content: str) -> bool:
        """True when the content differs from what was last applied."""
        return content != self.last_seen_content

    def refresh(self, content: str, presenter: Presenter) -> None:
        """Rebuild from content and apply it; the content is remembered only once applied."""
        self.load(content)
        self.apply(presenter)
        self.last_seen_content = content

    def invalidate(self) -> None:
        """Forget the last seen content so the next tick reapplies."""
        self.last_seen_content = None

    @abstractmethod
    def load(self, content: str) -> None:
        """Decode content and derive slots"""
        pass

    @abstractmethod
    def apply(self, presenter: Presenter) -> None:
        """Push the current slots to the presenter"""
        pass

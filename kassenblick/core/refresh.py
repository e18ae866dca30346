"""
Change detection: re-read each source per tick and recompute/reapply only on change.
"""
import logging
from typing import List

from .component_base import StatusComponent
from .presenter import Presenter
from .sources import SourceUnavailableError

logger = logging.getLogger("KassenBlick.refresh")


class RefreshOrchestrator:
    """Owns the tracks and the presenter. Ticks are serialized by the caller."""

    def __init__(self, components: List[StatusComponent], presenter: Presenter):
        self.components = list(components)
        self.presenter = presenter

    def tick(self) -> List[str]:
        """Run one update pass. Returns the names of the components that were reapplied."""
        applied = []
        for component in self.components:
            try:
                if self._refresh_component(component):
                    applied.append(component.name)
            except Exception as e:
                logger.exception(f"Error refreshing {component.name}: {e}")

        if applied:
            try:
                self.presenter.redraw()
            except Exception as e:
                logger.exception(f"Error redrawing: {e}")
        return applied

    def _refresh_component(self, component: StatusComponent) -> bool:
        try:
            content = component.read_source()
        except SourceUnavailableError as e:
            # Report once per outage; repeats at every tick go to debug
            if component.source_available:
                logger.error(str(e))
            else:
                logger.debug(str(e))
            component.source_available = False
            return False

        if not component.source_available:
            logger.info(f"{component.name}: source available again")
            component.source_available = True

        if not component.needs_refresh(content):
            return False

        logger.debug(f"{component.name}: source changed, recomputing")
        component.refresh(content, self.presenter)
        return True

    def invalidate(self) -> None:
        """Force every component to reapply on the next tick."""
        for component in self.components:
            component.invalidate()

"""
Task schedule types and abstract BaseTask. Schedules run on local time and live in memory.
"""
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class TaskType:
    """Schedule kind for tasks."""
    DAILY = "daily"
    HOURLY = "hourly"
    INTERVAL_SECONDS = "interval_seconds"
    MONTHLY = "monthly"


def _parse_time(time_str: Any) -> tuple:
    parts = str(time_str or "00:00").strip().split(":")
    hour = int(parts[0]) if parts and parts[0] else 0
    minute = int(parts[1]) if len(parts) > 1 else 0
    return hour, minute


def compute_next_run(
    schedule_type: str,
    schedule_config: Optional[Dict[str, Any]],
    last_run: Optional[datetime],
) -> datetime:
    """Compute next run datetime from schedule_type, schedule_config, and last_run."""
    if last_run is None:
        last_run = datetime.now()

    if schedule_type == TaskType.DAILY and schedule_config:
        hour, minute = _parse_time(schedule_config.get("time", "00:00"))
        next_run = last_run.replace(hour=hour, minute=minute, second=0, microsecond=0)
        if next_run <= last_run:
            next_run += timedelta(days=1)
        return next_run

    if schedule_type == TaskType.HOURLY:
        return last_run + timedelta(hours=1)

    if schedule_type == TaskType.INTERVAL_SECONDS and schedule_config:
        sec = int(schedule_config.get("interval_seconds", 86400))
        return last_run + timedelta(seconds=sec)

    if schedule_type == TaskType.MONTHLY and schedule_config:
        # Days past 28 would not exist in every month
        day = min(max(int(schedule_config.get("day", 1)), 1), 28)
        hour, minute = _parse_time(schedule_config.get("time", "00:00"))
        next_run = last_run.replace(day=day, hour=hour, minute=minute, second=0, microsecond=0)
        if next_run <= last_run:
            if next_run.month == 12:
                next_run = next_run.replace(year=next_run.year + 1, month=1)
            else:
                next_run = next_run.replace(month=next_run.month + 1)
        return next_run

    return last_run + timedelta(days=1)


class BaseTask(ABC):
    """
    Abstract base for scheduled tasks. Subclasses implement run();
    the base keeps next_run in memory and answers is_due().
    """

    def __init__(self, name: str, schedule_type: str, schedule_config: Optional[Dict[str, Any]] = None):
        self.name = name
        self.schedule_type = schedule_type
        self.schedule_config = schedule_config or {}
        self.logger = logging.getLogger(f"KassenBlick.{self.__class__.__name__}")
        self.last_run_at: Optional[datetime] = None
        self.next_run_at: Optional[datetime] = None

    def get_next_run(self, last_run: Optional[datetime] = None) -> datetime:
        """Compute next run time from schedule_type and schedule_config."""
        return compute_next_run(self.schedule_type, self.schedule_config, last_run)

    def ensure_scheduled(self, now: Optional[datetime] = None) -> datetime:
        """Set next_run_at from now if the task has never been scheduled."""
        if self.next_run_at is None:
            self.next_run_at = self.get_next_run(now or datetime.now())
            self.logger.info(f"{self.name}: next run at {self.next_run_at}")
        return self.next_run_at

    def is_due(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now()
        return now >= self.ensure_scheduled(now)

    def mark_run(self, now: Optional[datetime] = None) -> None:
        """Record a run and compute the following one."""
        now = now or datetime.now()
        self.last_run_at = now
        self.next_run_at = self.get_next_run(now)
        self.logger.info(f"{self.name}: next run at {self.next_run_at}")

    def run_if_due(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now()
        if not self.is_due(now):
            return False
        try:
            self.run()
        except Exception as e:
            self.logger.exception(f"Task {self.name} failed: {e}")
        self.mark_run(now)
        return True

    @abstractmethod
    def run(self, **kwargs: Any) -> None:
        """Execute the task."""
        pass

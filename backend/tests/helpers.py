"""
Shared test helpers (importable from test modules and conftest).
"""

from datetime import datetime, timezone, timedelta
from typing import Optional

from meetups.services.interfaces import NotificationContext, Notifier


class RecordingNotifier(Notifier):
    """Collects contexts; optionally fails every call."""

    def __init__(self, fail_with: Optional[Exception] = None):
        self.sent: list[NotificationContext] = []
        self.fail_with = fail_with

    async def notify(self, context: NotificationContext) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append(context)


def next_month_at(hour: int, minute: int = 0) -> datetime:
    """A UTC instant ~30 days ahead at the given wall-clock time."""
    day = datetime.now(timezone.utc) + timedelta(days=30)
    return day.replace(hour=hour, minute=minute, second=0, microsecond=0)

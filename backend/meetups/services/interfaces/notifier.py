"""
Outbound notification interface.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class NotificationContext:
    """Everything a "new subscriber" message needs, assembled after the write."""

    owner_name: str
    owner_email: str
    meetup_id: int
    meetup_title: str
    meetup_date: datetime
    banner_url: Optional[str]
    subscriber_id: int
    subscriber_name: str
    subscriber_email: str
    subscriber_avatar_url: Optional[str]
    subscribed_at: datetime
    subscriber_count: int

    def to_dict(self) -> dict:
        data = asdict(self)
        data["meetup_date"] = self.meetup_date.isoformat()
        data["subscribed_at"] = self.subscribed_at.isoformat()
        return data


class Notifier(ABC):
    """
    Best-effort delivery of subscription notifications.

    Implementations:
    - RedisMailQueueNotifier: enqueue a mail job for the mail worker
    - LogNotifier: log only (development, Redis disabled)
    """

    @abstractmethod
    async def notify(self, context: NotificationContext) -> None:
        pass

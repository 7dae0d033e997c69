"""
Notifier factory.
Configures which notification backend to use.
"""

from typing import Optional

import redis.asyncio as redis

from meetups.core.config import Settings, get_settings
from meetups.core.logging import get_logger
from meetups.services.interfaces import Notifier
from meetups.services.notification_service import LogNotifier, RedisMailQueueNotifier

logger = get_logger(__name__)


def get_notifier(redis_client: Optional[redis.Redis], settings: Optional[Settings] = None) -> Notifier:
    """
    Get configured notifier.

    NOTIFIER_BACKEND=redis enqueues mail jobs; it falls back to logging
    when no Redis connection is available.
    """
    settings = settings or get_settings()

    if settings.NOTIFIER_BACKEND == "redis":
        if redis_client is not None:
            return RedisMailQueueNotifier(redis_client, settings.MAIL_QUEUE_KEY)
        logger.warning("notifier_fallback", backend="log", reason="redis_unavailable")

    return LogNotifier()

"""
Notifier implementations for "new subscriber" messages to meetup owners.

The mail itself is rendered and sent by the mail worker, which pops jobs
from a Redis list. This service only enqueues:

    LPUSH mail:queue '{"to": "Owner <owner@x>", "subject": ..., "template": "new-subscriber", "context": {...}}'

Delivery is best-effort. Failures are logged here and re-raised so the
dispatcher can count them; they never reach the subscriber's response.
"""

import json

import redis.asyncio as redis

from meetups.core.logging import get_logger
from meetups.services.interfaces import NotificationContext, Notifier

logger = get_logger(__name__)

NEW_SUBSCRIBER_TEMPLATE = "new-subscriber"


def build_mail_job(context: NotificationContext) -> dict:
    return {
        "to": f"{context.owner_name} <{context.owner_email}>",
        "subject": f"New subscription to your meetup - {context.meetup_title}",
        "template": NEW_SUBSCRIBER_TEMPLATE,
        "context": context.to_dict(),
    }


class RedisMailQueueNotifier(Notifier):

    def __init__(self, client: redis.Redis, queue_key: str = "mail:queue"):
        self._client = client
        self._queue_key = queue_key

    async def notify(self, context: NotificationContext) -> None:
        job = build_mail_job(context)
        try:
            await self._client.lpush(self._queue_key, json.dumps(job))
        except redis.RedisError as e:
            logger.error(
                "mail_enqueue_failed",
                queue=self._queue_key,
                meetup_id=context.meetup_id,
                error=str(e),
            )
            raise
        logger.info("mail_enqueued", queue=self._queue_key, meetup_id=context.meetup_id, to=job["to"])


class LogNotifier(Notifier):
    """Logs the mail job instead of sending it."""

    async def notify(self, context: NotificationContext) -> None:
        job = build_mail_job(context)
        logger.info(
            "subscription_notification",
            to=job["to"],
            subject=job["subject"],
            subscriber_count=context.subscriber_count,
        )

"""
FastAPI dependencies.
"""

from fastapi import Request

from meetups.services.subscription_service import SubscriptionService


def get_subscription_service(request: Request) -> SubscriptionService:
    """The process-wide service built in the application lifespan."""
    return request.app.state.subscription_service

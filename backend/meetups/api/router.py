"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from meetups.api.routes import subscriptions

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(subscriptions.router)

"""
Service interfaces for dependency inversion.
Allows swapping implementations without changing business logic.
"""

from .repositories import EventRepository, UserRepository
from .notifier import NotificationContext, Notifier

__all__ = ['EventRepository', 'UserRepository', 'NotificationContext', 'Notifier']

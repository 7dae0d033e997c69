"""
Domain values and outcomes of the subscription admission engine.
"""

from .models import (
    EventSnapshot,
    EventSummary,
    FileRef,
    SubscriptionOperation,
    SubscriptionRequest,
    UserProfile,
    as_utc,
    utcnow,
)
from .errors import (
    AdmissionError,
    AdmissionErrorKind,
    AdmissionResult,
    ConcurrentModificationError,
    InfrastructureError,
    RepositoryError,
)

__all__ = [
    'EventSnapshot', 'EventSummary', 'FileRef', 'SubscriptionOperation',
    'SubscriptionRequest', 'UserProfile', 'as_utc', 'utcnow',
    'AdmissionError', 'AdmissionErrorKind', 'AdmissionResult',
    'ConcurrentModificationError', 'InfrastructureError', 'RepositoryError',
]

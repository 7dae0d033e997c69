from meetups.schemas.meetup import (
    AdmissionErrorResponse,
    ConflictResponse,
    FileResponse,
    MeetupSummaryResponse,
    OwnerResponse,
    SubscribedMeetupResponse,
)

__all__ = [
    "AdmissionErrorResponse", "ConflictResponse", "FileResponse",
    "MeetupSummaryResponse", "OwnerResponse", "SubscribedMeetupResponse",
]

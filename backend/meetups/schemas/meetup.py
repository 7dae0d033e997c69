"""
Pydantic schemas for subscription responses.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class FileResponse(BaseModel):
    id: int
    path: str
    url: str

    model_config = {"from_attributes": True}


class OwnerResponse(BaseModel):
    id: int
    name: str
    avatar: Optional[FileResponse] = None

    model_config = {"from_attributes": True}


class MeetupSummaryResponse(BaseModel):
    title: str
    description: Optional[str]
    location: Optional[str]
    date: datetime
    banner: Optional[FileResponse]

    model_config = {"from_attributes": True}


class SubscribedMeetupResponse(BaseModel):
    id: int
    title: str
    description: Optional[str]
    location: Optional[str]
    date: datetime
    owner: Optional[OwnerResponse]
    banner: Optional[FileResponse]

    model_config = {"from_attributes": True}


class ConflictResponse(BaseModel):
    id: int
    title: str
    location: Optional[str]
    date: datetime

    model_config = {"from_attributes": True}


class AdmissionErrorResponse(BaseModel):
    error: str
    reason: str
    conflict: Optional[ConflictResponse] = None

"""
Subscription endpoints: join, leave and list a user's upcoming meetups.
"""

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from meetups.api.deps import get_subscription_service
from meetups.core.security import get_current_user_id
from meetups.domain import AdmissionError, AdmissionErrorKind
from meetups.schemas.meetup import (
    AdmissionErrorResponse,
    ConflictResponse,
    MeetupSummaryResponse,
    SubscribedMeetupResponse,
)
from meetups.services.subscription_service import SubscriptionService

router = APIRouter(tags=["Subscriptions"])

REJECTION_STATUS = {
    AdmissionErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    AdmissionErrorKind.ALREADY_SUBSCRIBED: status.HTTP_409_CONFLICT,
    AdmissionErrorKind.CONFLICTING_SUBSCRIPTION: status.HTTP_409_CONFLICT,
}


def rejection_response(error: AdmissionError) -> JSONResponse:
    body = AdmissionErrorResponse(
        error=error.message,
        reason=error.kind.value,
        conflict=ConflictResponse.model_validate(error.conflict) if error.conflict else None,
    )
    return JSONResponse(
        status_code=REJECTION_STATUS.get(error.kind, status.HTTP_400_BAD_REQUEST),
        content=body.model_dump(mode="json"),
    )


@router.post(
    "/meetups/{meetup_id}/subscriptions",
    response_model=MeetupSummaryResponse,
    responses={400: {"model": AdmissionErrorResponse}, 404: {"model": AdmissionErrorResponse},
               409: {"model": AdmissionErrorResponse}},
)
async def subscribe(
    meetup_id: int,
    user_id: int = Depends(get_current_user_id),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """
    Subscribe to a meetup.

    Rejected when the meetup is over, when the caller owns it, when the caller
    is already subscribed, or when the caller holds another meetup within the
    minimum separation window (the conflicting meetup is returned).
    """
    result = await service.join(meetup_id, user_id)
    if not result.ok:
        return rejection_response(result.error)
    return MeetupSummaryResponse.model_validate(result.value)


@router.delete(
    "/meetups/{meetup_id}/subscriptions",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={400: {"model": AdmissionErrorResponse}, 404: {"model": AdmissionErrorResponse}},
)
async def unsubscribe(
    meetup_id: int,
    user_id: int = Depends(get_current_user_id),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Leave a meetup that has not happened yet."""
    result = await service.leave(meetup_id, user_id)
    if not result.ok:
        return rejection_response(result.error)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/subscriptions", response_model=list[SubscribedMeetupResponse])
async def list_subscriptions(
    user_id: int = Depends(get_current_user_id),
    service: SubscriptionService = Depends(get_subscription_service),
):
    """Upcoming meetups the caller is subscribed to, soonest first."""
    meetups = await service.list_my_subscriptions(user_id)
    return [SubscribedMeetupResponse.model_validate(m) for m in meetups]

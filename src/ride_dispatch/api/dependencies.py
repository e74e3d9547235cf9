"""FastAPI dependency injection providers."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from ride_dispatch.booking import BookingService
from ride_dispatch.inbox import NotificationInbox
from ride_dispatch.lifecycle import RideLifecycle, TransitionResult
from ride_dispatch.matching import MatchingServer
from ride_dispatch.tracking import LocationTracker


def get_matching_server(request: Request) -> MatchingServer:
    """Retrieve MatchingServer from app state."""
    return request.app.state.matching_server


def get_booking_service(request: Request) -> BookingService:
    """Retrieve BookingService from app state."""
    return request.app.state.booking_service


def get_lifecycle(request: Request) -> RideLifecycle:
    """Retrieve RideLifecycle from app state."""
    return request.app.state.lifecycle


def get_location_tracker(request: Request) -> LocationTracker:
    """Retrieve LocationTracker from app state."""
    return request.app.state.location_tracker


def get_notification_inbox(request: Request) -> NotificationInbox:
    """Retrieve NotificationInbox from app state."""
    return request.app.state.notification_inbox


MatchingServerDep = Annotated[MatchingServer, Depends(get_matching_server)]
BookingServiceDep = Annotated[BookingService, Depends(get_booking_service)]
LifecycleDep = Annotated[RideLifecycle, Depends(get_lifecycle)]
LocationTrackerDep = Annotated[LocationTracker, Depends(get_location_tracker)]
NotificationInboxDep = Annotated[NotificationInbox, Depends(get_notification_inbox)]


def raise_for_failure(result: TransitionResult) -> TransitionResult:
    """Turn an unsuccessful lifecycle result into the matching HTTP error."""
    if result.success:
        return result
    status_code = 404 if result.error == "not_found" else 503
    raise HTTPException(status_code=status_code, detail=result.message)

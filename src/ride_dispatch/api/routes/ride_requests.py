from typing import Literal

from fastapi import APIRouter, Depends, status

from ride_dispatch.api.auth import verify_api_key
from ride_dispatch.api.dependencies import (
    BookingServiceDep,
    LifecycleDep,
    MatchingServerDep,
    raise_for_failure,
)
from ride_dispatch.api.models import AcceptRequest, ConsistencyResponse, RideRequestCreate
from ride_dispatch.booking import BookingResult
from ride_dispatch.lifecycle import TransitionResult
from ride_dispatch.matching import MatchResult
from ride_dispatch.ride import RideRequest
from ride_dispatch.service_class import ServiceClass

router = APIRouter(dependencies=[Depends(verify_api_key)])


@router.post("", response_model=BookingResult, status_code=status.HTTP_201_CREATED)
def create_ride_request(body: RideRequestCreate, booking: BookingServiceDep):
    """Store a pending ride request and, unless disabled, match it right away."""
    return booking.create_ride_request(
        rider_id=body.rider_id,
        pickup=body.pickup,
        destination=body.destination,
        service_class=body.service_class,
        notes=body.notes,
        auto_match=body.auto_match,
    )


@router.get("/pending", response_model=list[RideRequest])
def list_pending(booking: BookingServiceDep, service_class: ServiceClass | None = None):
    return booking.list_pending_requests(service_class)


@router.post("/offers/expire", response_model=list[MatchResult])
def expire_offers(matching_server: MatchingServerDep):
    """Release drivers on unanswered offers and re-offer those rides."""
    return matching_server.expire_offers()


@router.post("/{request_id}/match", response_model=MatchResult)
def match_request(request_id: str, matching_server: MatchingServerDep):
    """Run auto-matching; failures are reported in the body, not as HTTP errors."""
    return matching_server.auto_match(request_id)


@router.post("/{request_id}/accept", response_model=TransitionResult)
def accept_request(request_id: str, body: AcceptRequest, lifecycle: LifecycleDep):
    return raise_for_failure(
        lifecycle.accept_request(request_id, body.driver_id, body.vehicle_id)
    )


@router.get("/{request_id}/consistency", response_model=ConsistencyResponse)
def check_consistency(request_id: str, lifecycle: LifecycleDep):
    gaps = lifecycle.check_consistency(request_id)
    return ConsistencyResponse(request_id=request_id, consistent=not gaps, gaps=gaps)


@router.post("/{request_id}/{action}", response_model=TransitionResult)
def transition_request(
    request_id: str,
    action: Literal["start", "complete", "cancel"],
    lifecycle: LifecycleDep,
):
    return raise_for_failure(lifecycle.apply_request_action(request_id, action))

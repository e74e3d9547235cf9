from typing import Literal

from fastapi import APIRouter, Depends

from ride_dispatch.api.auth import verify_api_key
from ride_dispatch.api.dependencies import LifecycleDep, raise_for_failure
from ride_dispatch.api.models import CompleteRideRequest
from ride_dispatch.lifecycle import TransitionResult

router = APIRouter(dependencies=[Depends(verify_api_key)])


@router.post("/{ride_id}/complete", response_model=TransitionResult)
def complete_ride(
    ride_id: str, lifecycle: LifecycleDep, body: CompleteRideRequest | None = None
):
    """Finish the trip; without an actual fare the request's estimate is charged."""
    actual_fare = body.actual_fare if body else None
    return raise_for_failure(lifecycle.complete_ride(ride_id, actual_fare))


@router.post("/{ride_id}/{action}", response_model=TransitionResult)
def transition_ride(
    ride_id: str,
    action: Literal["pickup", "start", "cancel"],
    lifecycle: LifecycleDep,
):
    return raise_for_failure(lifecycle.apply_ride_action(ride_id, action))

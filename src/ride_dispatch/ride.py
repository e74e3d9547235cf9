"""Ride request and ride records with their lifecycle transition tables."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from ride_dispatch.core.exceptions import InvalidTransitionError
from ride_dispatch.service_class import ServiceClass


class RideRequestStatus(str, Enum):
    """Rider-side request lifecycle states."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RideStatus(str, Enum):
    """Driver-side ride lifecycle states."""

    WAITING = "waiting"
    PICKED_UP = "picked_up"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# action -> (states it may be applied from, resulting state)
REQUEST_TRANSITIONS: dict[str, tuple[frozenset[RideRequestStatus], RideRequestStatus]] = {
    "accept": (frozenset({RideRequestStatus.PENDING}), RideRequestStatus.ACCEPTED),
    "start": (frozenset({RideRequestStatus.ACCEPTED}), RideRequestStatus.IN_PROGRESS),
    "complete": (frozenset({RideRequestStatus.IN_PROGRESS}), RideRequestStatus.COMPLETED),
    "cancel": (
        frozenset({RideRequestStatus.PENDING, RideRequestStatus.ACCEPTED}),
        RideRequestStatus.CANCELLED,
    ),
}

RIDE_TRANSITIONS: dict[str, tuple[frozenset[RideStatus], RideStatus]] = {
    "pickup": (frozenset({RideStatus.WAITING}), RideStatus.PICKED_UP),
    "start": (frozenset({RideStatus.PICKED_UP}), RideStatus.IN_PROGRESS),
    "complete": (frozenset({RideStatus.IN_PROGRESS}), RideStatus.COMPLETED),
    "cancel": (
        frozenset({RideStatus.WAITING, RideStatus.PICKED_UP, RideStatus.IN_PROGRESS}),
        RideStatus.CANCELLED,
    ),
}

# Ride timestamp set by each transition
RIDE_TIMESTAMP_FIELDS: dict[str, str] = {
    "pickup": "pickup_time",
    "start": "start_time",
    "complete": "end_time",
}

TERMINAL_REQUEST_STATES = {RideRequestStatus.COMPLETED, RideRequestStatus.CANCELLED}
TERMINAL_RIDE_STATES = {RideStatus.COMPLETED, RideStatus.CANCELLED}


def next_request_status(current: RideRequestStatus, action: str) -> RideRequestStatus:
    """Return the status a request moves to, or raise InvalidTransitionError."""
    rule = REQUEST_TRANSITIONS.get(action)
    if rule is None or current not in rule[0]:
        raise InvalidTransitionError(action, RideRequestStatus(current).value)
    return rule[1]


def next_ride_status(current: RideStatus, action: str) -> RideStatus:
    """Return the status a ride moves to, or raise InvalidTransitionError."""
    rule = RIDE_TRANSITIONS.get(action)
    if rule is None or current not in rule[0]:
        raise InvalidTransitionError(action, RideStatus(current).value)
    return rule[1]


class GeoPoint(BaseModel):
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    address: str = ""


class RideRequest(BaseModel):
    """A rider's ask for transport."""

    request_id: str
    rider_id: str
    pickup: GeoPoint
    destination: GeoPoint
    service_class: ServiceClass
    estimated_fare: float = Field(ge=0)
    notes: str | None = None
    status: RideRequestStatus = RideRequestStatus.PENDING
    offered_driver_id: str | None = None
    offered_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_REQUEST_STATES


class Ride(BaseModel):
    """Operational record created once a driver commits to a request."""

    ride_id: str
    request_id: str
    driver_id: str
    vehicle_id: str | None = None
    status: RideStatus = RideStatus.WAITING
    pickup_time: datetime | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    actual_fare: float | None = Field(default=None, ge=0)
    passenger_rating: float | None = Field(default=None, ge=1.0, le=5.0)
    driver_rating: float | None = Field(default=None, ge=1.0, le=5.0)
    created_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_RIDE_STATES

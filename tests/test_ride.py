"""Tests for the ride request and ride transition tables."""

import pytest

from ride_dispatch.core.exceptions import InvalidTransitionError
from ride_dispatch.ride import (
    REQUEST_TRANSITIONS,
    RIDE_TRANSITIONS,
    GeoPoint,
    RideRequestStatus,
    RideStatus,
    next_request_status,
    next_ride_status,
)

LEGAL_REQUEST_MOVES = {
    (RideRequestStatus.PENDING, "accept"): RideRequestStatus.ACCEPTED,
    (RideRequestStatus.ACCEPTED, "start"): RideRequestStatus.IN_PROGRESS,
    (RideRequestStatus.IN_PROGRESS, "complete"): RideRequestStatus.COMPLETED,
    (RideRequestStatus.PENDING, "cancel"): RideRequestStatus.CANCELLED,
    (RideRequestStatus.ACCEPTED, "cancel"): RideRequestStatus.CANCELLED,
}

LEGAL_RIDE_MOVES = {
    (RideStatus.WAITING, "pickup"): RideStatus.PICKED_UP,
    (RideStatus.PICKED_UP, "start"): RideStatus.IN_PROGRESS,
    (RideStatus.IN_PROGRESS, "complete"): RideStatus.COMPLETED,
    (RideStatus.WAITING, "cancel"): RideStatus.CANCELLED,
    (RideStatus.PICKED_UP, "cancel"): RideStatus.CANCELLED,
    (RideStatus.IN_PROGRESS, "cancel"): RideStatus.CANCELLED,
}

ILLEGAL_REQUEST_MOVES = [
    (status, action)
    for status in RideRequestStatus
    for action in REQUEST_TRANSITIONS
    if (status, action) not in LEGAL_REQUEST_MOVES
]

ILLEGAL_RIDE_MOVES = [
    (status, action)
    for status in RideStatus
    for action in RIDE_TRANSITIONS
    if (status, action) not in LEGAL_RIDE_MOVES
]


@pytest.mark.unit
class TestRequestTransitions:
    @pytest.mark.parametrize(("current", "action"), list(LEGAL_REQUEST_MOVES))
    def test_legal_moves(self, current, action):
        assert next_request_status(current, action) == LEGAL_REQUEST_MOVES[(current, action)]

    @pytest.mark.parametrize(("current", "action"), ILLEGAL_REQUEST_MOVES)
    def test_illegal_moves_raise(self, current, action):
        with pytest.raises(InvalidTransitionError) as exc_info:
            next_request_status(current, action)
        assert exc_info.value.action == action
        assert exc_info.value.current_state == current.value

    def test_accept_completed_request(self):
        with pytest.raises(InvalidTransitionError, match="Cannot accept from state completed"):
            next_request_status(RideRequestStatus.COMPLETED, "accept")

    def test_unknown_action(self):
        with pytest.raises(InvalidTransitionError):
            next_request_status(RideRequestStatus.PENDING, "teleport")


@pytest.mark.unit
class TestRideTransitions:
    @pytest.mark.parametrize(("current", "action"), list(LEGAL_RIDE_MOVES))
    def test_legal_moves(self, current, action):
        assert next_ride_status(current, action) == LEGAL_RIDE_MOVES[(current, action)]

    @pytest.mark.parametrize(("current", "action"), ILLEGAL_RIDE_MOVES)
    def test_illegal_moves_raise(self, current, action):
        with pytest.raises(InvalidTransitionError):
            next_ride_status(current, action)

    def test_start_skipping_pickup(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            next_ride_status(RideStatus.WAITING, "start")
        assert exc_info.value.action == "start"
        assert exc_info.value.current_state == "waiting"

    def test_terminal_states_have_no_successors(self):
        for status in (RideStatus.COMPLETED, RideStatus.CANCELLED):
            for action in RIDE_TRANSITIONS:
                with pytest.raises(InvalidTransitionError):
                    next_ride_status(status, action)


@pytest.mark.unit
class TestGeoPoint:
    def test_rejects_out_of_range_latitude(self):
        with pytest.raises(ValueError):
            GeoPoint(latitude=91.0, longitude=0.0)

    def test_rejects_out_of_range_longitude(self):
        with pytest.raises(ValueError):
            GeoPoint(latitude=0.0, longitude=-181.0)

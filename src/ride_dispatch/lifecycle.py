"""Ride and ride-request lifecycle guard.

Each transition is an independent operation: load the stored status, check
it against the transition table in ``ride``, then write the new status. Only
InvalidTransitionError escapes; missing records and storage failures come back
as an unsuccessful TransitionResult.
"""

import logging
from collections.abc import Callable
from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, Field

from ride_dispatch.core.clock import Clock, SystemClock
from ride_dispatch.core.exceptions import NotFoundError, StorageError
from ride_dispatch.dispatch_logging import log_context, log_request_context
from ride_dispatch.matching.offer_claims import OfferClaims
from ride_dispatch.ride import (
    RIDE_TIMESTAMP_FIELDS,
    Ride,
    RideRequest,
    RideRequestStatus,
    RideStatus,
    next_request_status,
    next_ride_status,
)
from ride_dispatch.settings import MatchingSettings
from ride_dispatch.store import DispatchStore

logger = logging.getLogger(__name__)


class TransitionResult(BaseModel):
    success: bool
    entity_id: str
    status: str | None = None
    ride_id: str | None = None
    error: Literal["not_found", "storage_error"] | None = None
    message: str | None = None
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def failed(
        cls, entity_id: str, error: Literal["not_found", "storage_error"], message: str
    ) -> "TransitionResult":
        return cls(success=False, entity_id=entity_id, error=error, message=message)


class RideLifecycle:
    """Applies request and ride transitions against the store."""

    def __init__(
        self,
        store: DispatchStore,
        clock: Clock | None = None,
        settings: MatchingSettings | None = None,
    ):
        self._store = store
        self._clock = clock or SystemClock()
        self._settings = settings or MatchingSettings()
        self._offers = OfferClaims(store, self._settings, self._clock)

    # --- Ride requests ---

    def accept_request(
        self, request_id: str, driver_id: str, vehicle_id: str | None = None
    ) -> TransitionResult:
        """Driver commits to a pending request; creates the waiting Ride.

        The status change and the new Ride are written together, so a storage
        failure leaves the request pending and the accept can be retried.
        """

        def accept(request: RideRequest, new_status: RideRequestStatus) -> dict[str, Any]:
            chosen_vehicle = vehicle_id
            if chosen_vehicle is None:
                vehicles = self._store.query_active_vehicles(driver_id, request.service_class)
                chosen_vehicle = vehicles[0].vehicle_id if vehicles else None

            if self._settings.claim_drivers:
                self._offers.release(
                    request, "accepted by another driver", keep_driver_id=driver_id
                )

            ride = self._store.accept_ride_request(
                request.request_id,
                Ride(
                    ride_id=str(uuid4()),
                    request_id=request.request_id,
                    driver_id=driver_id,
                    vehicle_id=chosen_vehicle,
                    status=RideStatus.WAITING,
                ),
            )
            logger.info(
                f"Driver {driver_id} accepted request {request.request_id}, ride {ride.ride_id}"
            )
            if self._settings.claim_drivers:
                self._claim_for_ride(driver_id, ride.ride_id)
            return {"ride_id": ride.ride_id}

        with log_context(driver_id=driver_id):
            return self._transition_request(request_id, "accept", accept)

    def start_request(self, request_id: str) -> TransitionResult:
        return self._transition_request(request_id, "start")

    def complete_request(self, request_id: str) -> TransitionResult:
        def complete(request: RideRequest, new_status: RideRequestStatus) -> dict[str, Any]:
            self._write_status(request, new_status)
            try:
                gaps = self.check_consistency(request.request_id)
            except StorageError as e:
                logger.warning(f"Consistency check skipped for {request.request_id}: {e}")
                return {}
            for gap in gaps:
                logger.warning(f"Ride request {request.request_id} completed with gap: {gap}")
            return {"warnings": gaps}

        return self._transition_request(request_id, "complete", complete)

    def cancel_request(self, request_id: str) -> TransitionResult:
        def cancel(request: RideRequest, new_status: RideRequestStatus) -> dict[str, Any]:
            if self._settings.claim_drivers:
                self._offers.release(request, "request cancelled")
            return self._write_status(request, new_status)

        return self._transition_request(request_id, "cancel", cancel)

    def apply_request_action(self, request_id: str, action: str) -> TransitionResult:
        """Dispatch a request action by name (start, complete, cancel)."""
        handlers: dict[str, Callable[[str], TransitionResult]] = {
            "start": self.start_request,
            "complete": self.complete_request,
            "cancel": self.cancel_request,
        }
        handler = handlers.get(action)
        if handler is None:
            return self._transition_request(request_id, action)
        return handler(request_id)

    # --- Rides ---

    def pickup_ride(self, ride_id: str) -> TransitionResult:
        return self._transition_ride(ride_id, "pickup")

    def start_ride(self, ride_id: str) -> TransitionResult:
        return self._transition_ride(ride_id, "start")

    def complete_ride(self, ride_id: str, actual_fare: float | None = None) -> TransitionResult:
        if actual_fare is not None and actual_fare < 0:
            raise ValueError("Actual fare must be non-negative")
        return self._transition_ride(ride_id, "complete", actual_fare=actual_fare)

    def cancel_ride(self, ride_id: str) -> TransitionResult:
        return self._transition_ride(ride_id, "cancel")

    def apply_ride_action(
        self, ride_id: str, action: str, actual_fare: float | None = None
    ) -> TransitionResult:
        """Dispatch a ride action by name (pickup, start, complete, cancel)."""
        if action == "complete":
            return self.complete_ride(ride_id, actual_fare)
        return self._transition_ride(ride_id, action)

    # --- Consistency ---

    def check_consistency(self, request_id: str) -> list[str]:
        """Report divergence between a request and the rides created for it."""
        request = self._store.get_ride_request(request_id)
        if request is None:
            raise NotFoundError(f"Ride request {request_id} not found")

        rides = self._store.list_rides_for_request(request_id)
        live = [r for r in rides if r.status != RideStatus.CANCELLED]
        active = [r for r in live if not r.is_terminal]
        completed = [r for r in live if r.status == RideStatus.COMPLETED]

        gaps = []
        if len(live) > 1:
            gaps.append(f"{len(live)} non-cancelled rides exist for one request")

        status = request.status
        if status == RideRequestStatus.COMPLETED and not completed:
            gaps.append("request completed without a completed ride")
        if status != RideRequestStatus.COMPLETED:
            for ride in completed:
                gaps.append(f"ride {ride.ride_id} completed but request is {status.value}")
        if status in (RideRequestStatus.ACCEPTED, RideRequestStatus.IN_PROGRESS) and not live:
            gaps.append(f"request {status.value} has no active ride")
        if status in (RideRequestStatus.PENDING, RideRequestStatus.CANCELLED):
            for ride in active:
                gaps.append(f"request {status.value} but ride {ride.ride_id} is {ride.status.value}")
        return gaps

    # --- Internals ---

    def _transition_request(
        self,
        request_id: str,
        action: str,
        apply: Callable[[RideRequest, RideRequestStatus], dict[str, Any]] | None = None,
    ) -> TransitionResult:
        """Check the action against the stored status, then let ``apply`` write it.

        ``apply`` defaults to writing the new status alone and returns extra
        TransitionResult fields.
        """
        with log_request_context(request_id):
            try:
                request = self._store.get_ride_request(request_id)
                if request is None:
                    return TransitionResult.failed(
                        request_id, "not_found", f"Ride request {request_id} not found"
                    )

                new_status = next_request_status(request.status, action)
                extra = (apply or self._write_status)(request, new_status)
                logger.info(
                    f"Ride request {request_id}: {request.status.value} -> {new_status.value}"
                )
            except NotFoundError as e:
                return TransitionResult.failed(request_id, "not_found", e.message)
            except StorageError as e:
                logger.error(f"Ride request {request_id} {action} failed: {e}")
                return TransitionResult.failed(request_id, "storage_error", e.message)

            return TransitionResult(
                success=True, entity_id=request_id, status=new_status.value, **extra
            )

    def _write_status(self, request: RideRequest, new_status: RideRequestStatus) -> dict[str, Any]:
        self._store.update_ride_request(request.request_id, {"status": new_status})
        return {}

    def _claim_for_ride(self, driver_id: str, ride_id: str) -> None:
        try:
            claimed = self._store.claim_driver(driver_id)
        except StorageError as e:
            # The ride is already committed; a failed claim only leaves the driver discoverable
            logger.warning(f"Could not mark driver {driver_id} busy for ride {ride_id}: {e}")
            return
        if not claimed:
            logger.debug(f"Driver {driver_id} was already busy when taking ride {ride_id}")

    def _transition_ride(
        self, ride_id: str, action: str, actual_fare: float | None = None
    ) -> TransitionResult:
        with log_context(ride_id=ride_id):
            try:
                ride = self._store.get_ride(ride_id)
                if ride is None:
                    return TransitionResult.failed(ride_id, "not_found", f"Ride {ride_id} not found")

                new_status = next_ride_status(ride.status, action)
                patch: dict[str, Any] = {"status": new_status}
                timestamp_field = RIDE_TIMESTAMP_FIELDS.get(action)
                if timestamp_field:
                    patch[timestamp_field] = self._clock.now()
                if action == "complete":
                    patch["actual_fare"] = self._final_fare(ride, actual_fare)

                self._store.update_ride(ride_id, patch)
                logger.info(f"Ride {ride_id}: {ride.status.value} -> {new_status.value}")

                if self._settings.claim_drivers and new_status in (
                    RideStatus.COMPLETED,
                    RideStatus.CANCELLED,
                ):
                    self._store.release_driver(ride.driver_id)
            except NotFoundError as e:
                return TransitionResult.failed(ride_id, "not_found", e.message)
            except StorageError as e:
                logger.error(f"Ride {ride_id} {action} failed: {e}")
                return TransitionResult.failed(ride_id, "storage_error", e.message)

            return TransitionResult(
                success=True, entity_id=ride_id, status=new_status.value, ride_id=ride_id
            )

    def _final_fare(self, ride: Ride, actual_fare: float | None) -> float | None:
        if actual_fare is not None:
            return actual_fare
        request = self._store.get_ride_request(ride.request_id)
        return request.estimated_fare if request else None

"""Rider-facing booking: fare estimate, request creation, and the match trigger."""

import logging
from uuid import uuid4

from pydantic import BaseModel

from ride_dispatch.core.clock import Clock, SystemClock
from ride_dispatch.core.exceptions import StorageError
from ride_dispatch.dispatch_logging import log_context
from ride_dispatch.fare import FareBreakdown, FareCalculator, estimate_fare
from ride_dispatch.matching import MatchingServer, MatchResult
from ride_dispatch.ride import GeoPoint, RideRequest, RideRequestStatus
from ride_dispatch.service_class import ServiceClass
from ride_dispatch.store import DispatchStore

logger = logging.getLogger(__name__)


class BookingResult(BaseModel):
    request: RideRequest
    fare: FareBreakdown
    match: MatchResult | None = None


class BookingService:
    """Creates ride requests and invokes matching when one appears."""

    def __init__(
        self,
        store: DispatchStore,
        matching_server: MatchingServer,
        clock: Clock | None = None,
        fare_calculator: FareCalculator | None = None,
    ):
        self._store = store
        self._matching_server = matching_server
        self._clock = clock or SystemClock()
        self._fare_calculator = fare_calculator or FareCalculator()

    def estimate(
        self, pickup: GeoPoint, destination: GeoPoint, service_class: ServiceClass | str
    ) -> FareBreakdown:
        return estimate_fare(pickup, destination, service_class, self._fare_calculator)

    def create_ride_request(
        self,
        rider_id: str,
        pickup: GeoPoint,
        destination: GeoPoint,
        service_class: ServiceClass | str,
        notes: str | None = None,
        auto_match: bool = True,
    ) -> BookingResult:
        """Store a pending request with its fixed fare estimate, then try to match it.

        Storage failures while creating the request propagate; a failed match
        does not, it is reported on ``BookingResult.match``.
        """
        fare = self.estimate(pickup, destination, service_class)
        request = RideRequest(
            request_id=str(uuid4()),
            rider_id=rider_id,
            pickup=pickup,
            destination=destination,
            service_class=ServiceClass(service_class),
            estimated_fare=round(fare.total_fare, 2),
            notes=notes,
            status=RideRequestStatus.PENDING,
            created_at=self._clock.now(),
        )

        with log_context(request_id=request.request_id, rider_id=rider_id):
            request = self._store.create_ride_request(request)
            logger.info(
                f"Created {request.service_class.value} ride request {request.request_id} "
                f"({fare.distance_km:.1f}km, fare {request.estimated_fare:.2f})"
            )

            match = None
            if auto_match:
                match = self._matching_server.auto_match(request.request_id)
                request = self._reload(request)

        return BookingResult(request=request, fare=fare, match=match)

    def _reload(self, request: RideRequest) -> RideRequest:
        # Matching may have annotated the request or recorded the offered driver
        try:
            return self._store.get_ride_request(request.request_id) or request
        except StorageError as e:
            logger.warning(f"Could not reload ride request {request.request_id}: {e}")
            return request

    def list_pending_requests(
        self, service_class: ServiceClass | str | None = None
    ) -> list[RideRequest]:
        """Pending requests, newest first, optionally for one service class."""
        if service_class is not None:
            service_class = ServiceClass(service_class)
        return self._store.list_ride_requests(RideRequestStatus.PENDING, service_class)

"""Driver claims held by outstanding ride offers.

With driver claiming on, the offered driver is marked busy and drops out of
discovery. The claim is recorded on the request (``offered_driver_id`` and
``offered_at``) so it can be handed back when the offer ends without that
driver taking the ride: the request is cancelled, another driver accepts it,
the request is matched again, or the offer times out.
"""

import logging
from datetime import timedelta

from ride_dispatch.core.clock import Clock, SystemClock
from ride_dispatch.ride import RideRequest, RideRequestStatus
from ride_dispatch.settings import MatchingSettings
from ride_dispatch.store import DispatchStore

logger = logging.getLogger(__name__)


class OfferClaims:
    def __init__(
        self,
        store: DispatchStore,
        settings: MatchingSettings | None = None,
        clock: Clock | None = None,
    ):
        self._store = store
        self._settings = settings or MatchingSettings()
        self._clock = clock or SystemClock()

    def record(self, request_id: str, driver_id: str) -> None:
        self._store.update_ride_request(
            request_id, {"offered_driver_id": driver_id, "offered_at": self._clock.now()}
        )

    def release(
        self, request: RideRequest, reason: str, keep_driver_id: str | None = None
    ) -> str | None:
        """Free the driver holding the offer on ``request``; returns their id if one was freed.

        A driver that has since committed to another ride keeps its busy status.
        """
        driver_id = request.offered_driver_id
        if driver_id is None or driver_id == keep_driver_id:
            return None

        if self._store.has_active_ride(driver_id):
            logger.info(f"Offered driver {driver_id} is on another ride, not releasing")
        else:
            self._store.release_driver(driver_id)
        self._store.update_ride_request(
            request.request_id, {"offered_driver_id": None, "offered_at": None}
        )
        logger.info(
            f"Released driver {driver_id} from offer on ride request {request.request_id} "
            f"({reason})",
            extra={"driver_id": driver_id},
        )
        return driver_id

    def stale_offers(self) -> list[RideRequest]:
        """Pending requests whose offer has gone unanswered past the timeout, oldest first."""
        cutoff = self._clock.now() - timedelta(seconds=self._settings.offer_timeout_seconds)
        stale = [
            request
            for request in self._store.list_ride_requests(RideRequestStatus.PENDING)
            if request.offered_at is not None and request.offered_at <= cutoff
        ]
        return sorted(stale, key=lambda r: r.offered_at)  # type: ignore[arg-type, return-value]

"""Matching orchestration: discovery, selection, and notification hand-off."""

import logging

from pydantic import BaseModel

from ride_dispatch.core.clock import Clock, SystemClock
from ride_dispatch.core.exceptions import DispatchError, StorageError
from ride_dispatch.dispatch_logging import log_request_context
from ride_dispatch.geo.distance import eta_minutes
from ride_dispatch.ride import RideRequest, RideRequestStatus
from ride_dispatch.settings import MatchingSettings
from ride_dispatch.store import DispatchStore

from .discovery import CandidateDiscovery
from .notification_dispatch import NotificationDispatch
from .offer_claims import OfferClaims
from .scoring import MatchCandidate, rank_candidates

logger = logging.getLogger(__name__)

NO_DRIVERS_AVAILABLE = "no drivers available"
MATCHING_FAILED = "matching failed"
REQUEST_NOT_FOUND = "request not found"
REQUEST_NOT_PENDING = "request is not pending"


class MatchResult(BaseModel):
    """Outcome of one auto-match attempt; failures are values, not exceptions."""

    request_id: str
    matched: bool
    driver_id: str | None = None
    driver_rating: float | None = None
    distance_km: float | None = None
    eta_minutes: int | None = None
    score: float | None = None
    notification_id: str | None = None
    reason: str | None = None

    @classmethod
    def unmatched(cls, request_id: str, reason: str) -> "MatchResult":
        return cls(request_id=request_id, matched=False, reason=reason)


def match_note(distance_km: float, eta: int) -> str:
    return f"Matched with driver ({distance_km:.1f}km away, ETA: {eta}min)"


class MatchingServer:
    """Matches a pending ride request with the best-scoring nearby driver."""

    def __init__(
        self,
        store: DispatchStore,
        settings: MatchingSettings | None = None,
        clock: Clock | None = None,
        notification_dispatch: NotificationDispatch | None = None,
        discovery: CandidateDiscovery | None = None,
        offer_claims: OfferClaims | None = None,
    ):
        self._store = store
        self._settings = settings or MatchingSettings()
        self._clock = clock or SystemClock()
        self._notification_dispatch = notification_dispatch or NotificationDispatch(store)
        self._discovery = discovery or CandidateDiscovery(store, self._settings, self._clock)
        self._offer_claims = offer_claims or OfferClaims(store, self._settings, self._clock)

    def auto_match(
        self,
        request_id: str,
        annotate_request: bool = True,
        excluded_driver_ids: frozenset[str] = frozenset(),
    ) -> MatchResult:
        """Find the best driver for a request and hand the offer off.

        Never raises for environmental failures: storage errors become
        ``MatchResult(matched=False, reason="matching failed")`` so the rider
        can retry.

        Drivers in ``excluded_driver_ids`` are skipped, which lets an expired
        offer move on to the next candidate.
        """
        with log_request_context(request_id):
            try:
                request = self._store.get_ride_request(request_id)
            except StorageError:
                logger.exception(f"Could not load ride request {request_id}")
                return MatchResult.unmatched(request_id, MATCHING_FAILED)

            if request is None:
                logger.warning(f"Ride request {request_id} not found")
                return MatchResult.unmatched(request_id, REQUEST_NOT_FOUND)

            if request.status != RideRequestStatus.PENDING:
                logger.warning(
                    f"Ride request {request_id} is {request.status.value}, not matching"
                )
                return MatchResult.unmatched(request_id, REQUEST_NOT_PENDING)

            try:
                return self._match(request, annotate_request, excluded_driver_ids)
            except DispatchError:
                logger.exception(f"Matching failed for ride request {request_id}")
                self._notify_failure(request)
                return MatchResult.unmatched(request_id, MATCHING_FAILED)

    def _match(
        self,
        request: RideRequest,
        annotate_request: bool,
        excluded_driver_ids: frozenset[str],
    ) -> MatchResult:
        if self._settings.claim_drivers:
            self._offer_claims.release(request, "matching again")

        drivers = self._discovery.discover(request.pickup, request.service_class)
        if self._discovery.last_error is not None:
            raise self._discovery.last_error
        drivers = [d for d in drivers if d.driver_id not in excluded_driver_ids]
        ranked = rank_candidates(drivers, request.pickup, self._clock.now(), self._settings)
        winner = self._choose(ranked)

        if winner is None:
            logger.info(f"No drivers available for ride request {request.request_id}")
            self._notification_dispatch.notify_no_drivers(request)
            return MatchResult.unmatched(request.request_id, NO_DRIVERS_AVAILABLE)

        eta = eta_minutes(
            winner.sample.latitude,
            winner.sample.longitude,
            request.pickup.latitude,
            request.pickup.longitude,
            request.service_class,
        )

        try:
            notification = self._notification_dispatch.send_ride_offer(
                winner.driver_id, request, winner.distance_km, eta
            )
        except DispatchError:
            if self._settings.claim_drivers:
                self._release_quietly(winner.driver_id)
            raise

        if self._settings.claim_drivers:
            self._record_offer(request, winner.driver_id)

        if annotate_request:
            note = match_note(winner.distance_km, eta)
            if request.notes:
                note = f"{request.notes}\n{note}"
            try:
                self._store.update_ride_request(request.request_id, {"notes": note})
            except DispatchError as e:
                # Offer already sent; the note is best effort
                logger.warning(f"Could not annotate ride request {request.request_id}: {e}")

        logger.info(
            f"Matched ride request {request.request_id} with driver {winner.driver_id} "
            f"(score={winner.score:.3f}, distance={winner.distance_km:.1f}km, eta={eta}min)",
            extra={"driver_id": winner.driver_id, "rider_id": request.rider_id},
        )
        return MatchResult(
            request_id=request.request_id,
            matched=True,
            driver_id=winner.driver_id,
            driver_rating=winner.rating,
            distance_km=round(winner.distance_km, 1),
            eta_minutes=eta,
            score=winner.score,
            notification_id=notification.notification_id,
        )

    def expire_offers(self) -> list[MatchResult]:
        """Release drivers whose offer went unanswered and offer the ride to the next candidate.

        Only claimed offers are tracked, so this is a no-op unless driver
        claiming is on.
        """
        if not self._settings.claim_drivers:
            return []

        results = []
        for request in self._offer_claims.stale_offers():
            with log_request_context(request.request_id):
                try:
                    expired_driver = self._offer_claims.release(request, "offer expired")
                except DispatchError:
                    logger.exception(f"Could not expire offer on ride request {request.request_id}")
                    results.append(MatchResult.unmatched(request.request_id, MATCHING_FAILED))
                    continue

            excluded = frozenset({expired_driver}) if expired_driver else frozenset()
            results.append(self.auto_match(request.request_id, excluded_driver_ids=excluded))
        return results

    def _choose(self, ranked: list[MatchCandidate]) -> MatchCandidate | None:
        if not self._settings.claim_drivers:
            return ranked[0] if ranked else None

        # Walk best first; another request may have claimed a driver since discovery
        for candidate in ranked:
            if self._store.claim_driver(candidate.driver_id):
                return candidate
            logger.info(f"Driver {candidate.driver_id} already claimed, trying next candidate")
        return None

    def _notify_failure(self, request: RideRequest) -> None:
        try:
            self._notification_dispatch.notify_matching_failed(
                request.rider_id, request.request_id
            )
        except DispatchError as e:
            logger.error(f"Could not alert rider {request.rider_id} about failed matching: {e}")

    def _record_offer(self, request: RideRequest, driver_id: str) -> None:
        try:
            self._offer_claims.record(request.request_id, driver_id)
        except DispatchError as e:
            # An unrecorded claim could never be handed back
            logger.error(f"Could not record offer on ride request {request.request_id}: {e}")
            self._release_quietly(driver_id)

    def _release_quietly(self, driver_id: str) -> None:
        try:
            self._store.release_driver(driver_id)
        except DispatchError as e:
            logger.error(f"Could not release claim on driver {driver_id}: {e}")

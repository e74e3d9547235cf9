"""Candidate discovery: fresh drivers with an active vehicle of the requested class."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from ride_dispatch.core.clock import Clock, SystemClock
from ride_dispatch.core.exceptions import StorageError
from ride_dispatch.driver import DriverLocationSample, DriverStatus, ReporterRole, Vehicle
from ride_dispatch.geo.distance import haversine_distance_km
from ride_dispatch.ride import GeoPoint
from ride_dispatch.service_class import ServiceClass
from ride_dispatch.settings import MatchingSettings
from ride_dispatch.store import DispatchStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscoveredDriver:
    """A driver eligible for a request, before scoring."""

    sample: DriverLocationSample
    distance_km: float
    vehicles: tuple[Vehicle, ...] = field(default_factory=tuple)

    @property
    def driver_id(self) -> str:
        return self.sample.driver_id

    @property
    def active_vehicle_count(self) -> int:
        return len(self.vehicles)


class CandidateDiscovery:
    """Finds drivers near a pickup point whose last sample is fresh."""

    def __init__(
        self,
        store: DispatchStore,
        settings: MatchingSettings | None = None,
        clock: Clock | None = None,
    ):
        self._store = store
        self._settings = settings or MatchingSettings()
        self._clock = clock or SystemClock()
        self.last_error: StorageError | None = None

    def discover(
        self,
        pickup: GeoPoint,
        service_class: ServiceClass | str,
        radius_km: float | None = None,
    ) -> list[DiscoveredDriver]:
        """Return eligible drivers sorted by distance to the pickup point.

        A storage failure yields an empty list; the error is logged and kept
        on ``last_error`` for callers that need to tell it apart.
        """
        self.last_error = None
        service_class = ServiceClass(service_class)
        radius_km = self._settings.search_radius_km if radius_km is None else radius_km
        since = self._clock.now() - timedelta(minutes=self._settings.discovery_freshness_minutes)

        try:
            samples = self._store.query_locations_since(since)
            result = []
            for sample in self._latest_per_driver(samples, since):
                if sample.role != ReporterRole.DRIVER:
                    continue
                if self._settings.claim_drivers and sample.status == DriverStatus.BUSY:
                    continue

                vehicles = self._store.query_active_vehicles(sample.driver_id, service_class)
                if not vehicles:
                    continue

                distance_km = haversine_distance_km(
                    pickup.latitude, pickup.longitude, sample.latitude, sample.longitude
                )
                if distance_km > radius_km:
                    continue

                result.append(
                    DiscoveredDriver(
                        sample=sample, distance_km=distance_km, vehicles=tuple(vehicles)
                    )
                )
        except StorageError as e:
            logger.error(f"Driver discovery failed, treating as no drivers nearby: {e}")
            self.last_error = e
            return []

        result.sort(key=lambda d: d.distance_km)
        logger.info(
            f"Discovered {len(result)} {service_class.value} drivers within {radius_km}km "
            f"of ({pickup.latitude}, {pickup.longitude})"
        )
        return result

    def _latest_per_driver(
        self, samples: list[DriverLocationSample], since: datetime
    ) -> list[DriverLocationSample]:
        # Samples arrive most recent first; keep the first seen per driver
        seen: set[str] = set()
        latest = []
        for sample in samples:
            if sample.driver_id in seen or sample.captured_at < since:
                continue
            seen.add(sample.driver_id)
            latest.append(sample)
        return latest

"""Driver location reporting."""

import logging

from ride_dispatch.core.clock import Clock, SystemClock
from ride_dispatch.driver import DriverLocationSample, DriverStatus, ReporterRole
from ride_dispatch.service_class import ServiceClass
from ride_dispatch.store import DispatchStore

logger = logging.getLogger(__name__)


class LocationTracker:
    """Keeps the single live location sample of each driver current."""

    def __init__(self, store: DispatchStore, clock: Clock | None = None):
        self._store = store
        self._clock = clock or SystemClock()

    def report_location(
        self,
        driver_id: str,
        latitude: float,
        longitude: float,
        heading: float | None = None,
        speed: float | None = None,
        accuracy: float | None = None,
        role: ReporterRole | str = ReporterRole.DRIVER,
        vehicle_class: ServiceClass | str | None = None,
        status: DriverStatus | str | None = None,
    ) -> DriverLocationSample:
        """Replace the driver's sample with a new one captured now.

        Without an explicit status the stored one is kept (online for a first
        report), so a position update never releases a busy driver.
        Out-of-range coordinates raise ``pydantic.ValidationError``.
        """
        if status is None:
            previous = self._store.get_location(driver_id)
            status = previous.status if previous else DriverStatus.ONLINE

        sample = DriverLocationSample(
            driver_id=driver_id,
            latitude=latitude,
            longitude=longitude,
            heading=heading,
            speed=speed,
            accuracy=accuracy,
            captured_at=self._clock.now(),
            role=role,
            vehicle_class=vehicle_class,
            status=status,
        )
        self._store.upsert_location(sample)
        logger.debug(f"Driver {driver_id} at ({latitude:.5f}, {longitude:.5f}) {sample.status.value}")
        return sample

    def set_status(self, driver_id: str, status: DriverStatus | str) -> None:
        status = DriverStatus(status)
        self._store.set_driver_status(driver_id, status)
        logger.info(f"Driver {driver_id} is now {status.value}")

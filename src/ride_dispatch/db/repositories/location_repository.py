"""Driver location repository: one live sample per driver."""

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ride_dispatch.driver import DriverLocationSample, DriverStatus, ReporterRole
from ride_dispatch.service_class import ServiceClass

from ..schema import DriverLocation, DriverProfile


class LocationRepository:
    """Repository for driver location samples."""

    def __init__(self, session: Session):
        self.session = session

    def upsert(self, sample: DriverLocationSample) -> None:
        """Insert the driver's sample or replace the previous one."""
        row = self.session.get(DriverLocation, sample.driver_id)
        if row is None:
            row = DriverLocation(driver_id=sample.driver_id)
            self.session.add(row)

        row.latitude = sample.latitude
        row.longitude = sample.longitude
        row.heading = sample.heading
        row.speed = sample.speed
        row.accuracy = sample.accuracy
        row.role = sample.role.value
        row.vehicle_class = sample.vehicle_class.value if sample.vehicle_class else None
        row.status = sample.status.value
        row.captured_at = sample.captured_at

    def get(self, driver_id: str) -> DriverLocationSample | None:
        row = self.session.get(DriverLocation, driver_id)
        if row is None:
            return None
        profile = self.session.get(DriverProfile, driver_id)
        return self._to_domain(row, profile.rating if profile else None)

    def list_since(self, since: datetime) -> list[DriverLocationSample]:
        """List samples captured at or after `since`, most recent first."""
        stmt = (
            select(DriverLocation, DriverProfile.rating)
            .outerjoin(DriverProfile, DriverProfile.id == DriverLocation.driver_id)
            .where(DriverLocation.captured_at >= since)
            .order_by(DriverLocation.captured_at.desc())
        )
        result = self.session.execute(stmt)
        return [self._to_domain(row, rating) for row, rating in result.all()]

    def update_status(self, driver_id: str, status: DriverStatus) -> bool:
        row = self.session.get(DriverLocation, driver_id)
        if row is None:
            return False
        row.status = status.value
        return True

    def claim(self, driver_id: str) -> bool:
        """Mark the driver busy unless already busy; True when this call won."""
        stmt = (
            update(DriverLocation)
            .where(
                DriverLocation.driver_id == driver_id,
                DriverLocation.status != DriverStatus.BUSY.value,
            )
            .values(status=DriverStatus.BUSY.value)
        )
        result = self.session.execute(stmt)
        return result.rowcount == 1

    def _to_domain(self, row: DriverLocation, rating: float | None) -> DriverLocationSample:
        return DriverLocationSample(
            driver_id=row.driver_id,
            latitude=row.latitude,
            longitude=row.longitude,
            heading=row.heading,
            speed=row.speed,
            accuracy=row.accuracy,
            captured_at=row.captured_at,
            role=ReporterRole(row.role),
            vehicle_class=ServiceClass(row.vehicle_class) if row.vehicle_class else None,
            status=DriverStatus(row.status),
            rating=rating,
        )

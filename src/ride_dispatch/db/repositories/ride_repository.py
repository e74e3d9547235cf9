"""Ride repository."""

from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from ride_dispatch.ride import Ride as RideDomain
from ride_dispatch.ride import TERMINAL_RIDE_STATES, RideStatus

from ..schema import Ride

UPDATABLE_FIELDS = {
    "status",
    "pickup_time",
    "start_time",
    "end_time",
    "actual_fare",
    "passenger_rating",
    "driver_rating",
}


class RideRepository:
    """Repository for ride CRUD operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, ride: RideDomain, now: datetime) -> None:
        self.session.add(
            Ride(
                id=ride.ride_id,
                request_id=ride.request_id,
                driver_id=ride.driver_id,
                vehicle_id=ride.vehicle_id,
                status=ride.status.value,
                actual_fare=ride.actual_fare,
                created_at=ride.created_at or now,
                updated_at=now,
            )
        )

    def get(self, ride_id: str) -> RideDomain | None:
        row = self.session.get(Ride, ride_id)
        if row is None:
            return None
        return self._to_domain(row)

    def update(self, ride_id: str, patch: dict[str, Any], now: datetime) -> bool:
        """Apply a partial update; False when the ride does not exist."""
        unknown = set(patch) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update ride fields: {sorted(unknown)}")

        row = self.session.get(Ride, ride_id)
        if row is None:
            return False

        for field, value in patch.items():
            if field == "status":
                value = RideStatus(value).value
            setattr(row, field, value)
        row.updated_at = now
        return True

    def list_by_request(self, request_id: str) -> list[RideDomain]:
        """List rides created for a request, oldest first."""
        stmt = select(Ride).where(Ride.request_id == request_id).order_by(Ride.created_at)
        result = self.session.execute(stmt)
        return [self._to_domain(r) for r in result.scalars().all()]

    def has_active(self, driver_id: str) -> bool:
        """Whether the driver holds a ride that is neither completed nor cancelled."""
        stmt = (
            select(Ride.id)
            .where(Ride.driver_id == driver_id)
            .where(Ride.status.not_in([s.value for s in TERMINAL_RIDE_STATES]))
            .limit(1)
        )
        return self.session.execute(stmt).first() is not None

    def _to_domain(self, row: Ride) -> RideDomain:
        return RideDomain(
            ride_id=row.id,
            request_id=row.request_id,
            driver_id=row.driver_id,
            vehicle_id=row.vehicle_id,
            status=RideStatus(row.status),
            pickup_time=row.pickup_time,
            start_time=row.start_time,
            end_time=row.end_time,
            actual_fare=row.actual_fare,
            passenger_rating=row.passenger_rating,
            driver_rating=row.driver_rating,
            created_at=row.created_at,
        )

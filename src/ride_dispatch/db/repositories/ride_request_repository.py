"""Ride request repository."""

from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from ride_dispatch.ride import GeoPoint, RideRequestStatus
from ride_dispatch.ride import RideRequest as RideRequestDomain
from ride_dispatch.service_class import ServiceClass

from ..schema import RideRequest

# Domain fields a patch may touch
UPDATABLE_FIELDS = {"status", "notes", "estimated_fare", "offered_driver_id", "offered_at"}


class RideRequestRepository:
    """Repository for ride request CRUD operations."""

    def __init__(self, session: Session):
        self.session = session

    def create(self, request: RideRequestDomain, now: datetime) -> None:
        self.session.add(
            RideRequest(
                id=request.request_id,
                rider_id=request.rider_id,
                pickup_latitude=request.pickup.latitude,
                pickup_longitude=request.pickup.longitude,
                pickup_address=request.pickup.address,
                destination_latitude=request.destination.latitude,
                destination_longitude=request.destination.longitude,
                destination_address=request.destination.address,
                service_class=request.service_class.value,
                estimated_fare=request.estimated_fare,
                notes=request.notes,
                status=request.status.value,
                offered_driver_id=request.offered_driver_id,
                offered_at=request.offered_at,
                created_at=request.created_at or now,
                updated_at=now,
            )
        )

    def get(self, request_id: str) -> RideRequestDomain | None:
        """Get ride request by ID, returning domain model."""
        row = self.session.get(RideRequest, request_id)
        if row is None:
            return None
        return self._to_domain(row)

    def update(self, request_id: str, patch: dict[str, Any], now: datetime) -> bool:
        """Apply a partial update; False when the request does not exist."""
        unknown = set(patch) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update ride request fields: {sorted(unknown)}")

        row = self.session.get(RideRequest, request_id)
        if row is None:
            return False

        for field, value in patch.items():
            if field == "status":
                value = RideRequestStatus(value).value
            setattr(row, field, value)
        row.updated_at = now
        return True

    def list_by_status(
        self,
        status: RideRequestStatus,
        service_class: ServiceClass | None = None,
    ) -> list[RideRequestDomain]:
        """List requests in a status, newest first."""
        stmt = select(RideRequest).where(RideRequest.status == status.value)
        if service_class is not None:
            stmt = stmt.where(RideRequest.service_class == service_class.value)
        stmt = stmt.order_by(RideRequest.created_at.desc())
        result = self.session.execute(stmt)
        return [self._to_domain(r) for r in result.scalars().all()]

    def _to_domain(self, row: RideRequest) -> RideRequestDomain:
        """Convert ORM model to domain model."""
        return RideRequestDomain(
            request_id=row.id,
            rider_id=row.rider_id,
            pickup=GeoPoint(
                latitude=row.pickup_latitude,
                longitude=row.pickup_longitude,
                address=row.pickup_address,
            ),
            destination=GeoPoint(
                latitude=row.destination_latitude,
                longitude=row.destination_longitude,
                address=row.destination_address,
            ),
            service_class=ServiceClass(row.service_class),
            estimated_fare=row.estimated_fare,
            notes=row.notes,
            status=RideRequestStatus(row.status),
            offered_driver_id=row.offered_driver_id,
            offered_at=row.offered_at,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

"""Driver profile and vehicle repository."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from ride_dispatch.driver import Vehicle as VehicleDomain
from ride_dispatch.service_class import ServiceClass

from ..schema import DriverProfile, Vehicle


class DriverRepository:
    """Repository for driver profiles and their registered vehicles."""

    def __init__(self, session: Session):
        self.session = session

    def upsert_profile(
        self, driver_id: str, rating: float, full_name: str | None = None
    ) -> None:
        profile = self.session.get(DriverProfile, driver_id)
        if profile is None:
            profile = DriverProfile(id=driver_id)
            self.session.add(profile)
        profile.rating = rating
        if full_name is not None:
            profile.full_name = full_name

    def add_vehicle(self, vehicle: VehicleDomain) -> None:
        self.session.add(
            Vehicle(
                id=vehicle.vehicle_id,
                driver_id=vehicle.driver_id,
                vehicle_class=vehicle.vehicle_class.value,
                make=vehicle.make,
                model=vehicle.model,
                is_active=vehicle.is_active,
            )
        )

    def list_active_vehicles(
        self, driver_id: str, vehicle_class: ServiceClass
    ) -> list[VehicleDomain]:
        """List the driver's active vehicles of one class."""
        stmt = (
            select(Vehicle)
            .where(
                Vehicle.driver_id == driver_id,
                Vehicle.vehicle_class == vehicle_class.value,
                Vehicle.is_active.is_(True),
            )
            .order_by(Vehicle.created_at, Vehicle.id)
        )
        result = self.session.execute(stmt)
        return [self._to_domain(v) for v in result.scalars().all()]

    def _to_domain(self, vehicle: Vehicle) -> VehicleDomain:
        return VehicleDomain(
            vehicle_id=vehicle.id,
            driver_id=vehicle.driver_id,
            vehicle_class=ServiceClass(vehicle.vehicle_class),
            make=vehicle.make,
            model=vehicle.model,
            is_active=vehicle.is_active,
        )

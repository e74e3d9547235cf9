"""Driver location samples and vehicles as read by the matching core."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from ride_dispatch.service_class import ServiceClass


class DriverStatus(str, Enum):
    ONLINE = "online"
    BUSY = "busy"
    OFFLINE = "offline"


class ReporterRole(str, Enum):
    """Role of the user whose client reported a location."""

    DRIVER = "driver"
    RIDER = "rider"


class DriverLocationSample(BaseModel):
    """Point-in-time report of a driver's position (one live row per driver)."""

    driver_id: str
    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)
    heading: float | None = None
    speed: float | None = None
    accuracy: float | None = None
    captured_at: datetime
    role: ReporterRole = ReporterRole.DRIVER
    vehicle_class: ServiceClass | None = None
    status: DriverStatus = DriverStatus.ONLINE
    # Joined from the driver's profile, absent when the store has none
    rating: float | None = Field(default=None, ge=0.0, le=5.0)

    def age_minutes(self, now: datetime) -> float:
        return (now - self.captured_at).total_seconds() / 60


class Vehicle(BaseModel):
    """A driver's registered conveyance; read-only to matching."""

    vehicle_id: str
    driver_id: str
    vehicle_class: ServiceClass
    make: str | None = None
    model: str | None = None
    is_active: bool = True

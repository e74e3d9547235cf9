from typing import Literal

from pydantic import BaseModel, Field

from ride_dispatch.driver import DriverStatus, ReporterRole
from ride_dispatch.ride import GeoPoint
from ride_dispatch.service_class import ServiceClass


class RideRequestCreate(BaseModel):
    rider_id: str = Field(..., min_length=1)
    pickup: GeoPoint
    destination: GeoPoint
    service_class: ServiceClass = ServiceClass.CAR
    notes: str | None = None
    auto_match: bool = True


class AcceptRequest(BaseModel):
    driver_id: str = Field(..., min_length=1)
    vehicle_id: str | None = None


class CompleteRideRequest(BaseModel):
    actual_fare: float | None = Field(None, ge=0)


class LocationReport(BaseModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    heading: float | None = Field(None, ge=0.0, lt=360.0)
    speed: float | None = Field(None, ge=0.0)
    accuracy: float | None = Field(None, ge=0.0)
    role: ReporterRole = ReporterRole.DRIVER
    vehicle_class: ServiceClass | None = None
    status: DriverStatus | None = None


class StatusUpdate(BaseModel):
    status: DriverStatus


class FareEstimateRequest(BaseModel):
    pickup: GeoPoint
    destination: GeoPoint
    service_class: ServiceClass = ServiceClass.CAR


class ConsistencyResponse(BaseModel):
    request_id: str
    consistent: bool
    gaps: list[str]


class MarkAllReadResponse(BaseModel):
    updated: int


class HealthResponse(BaseModel):
    status: Literal["healthy"] = "healthy"

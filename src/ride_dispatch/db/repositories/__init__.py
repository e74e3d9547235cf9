"""Repository layer for database CRUD operations."""

from .driver_repository import DriverRepository
from .location_repository import LocationRepository
from .notification_repository import NotificationRepository
from .ride_repository import RideRepository
from .ride_request_repository import RideRequestRepository

__all__ = [
    "DriverRepository",
    "LocationRepository",
    "NotificationRepository",
    "RideRepository",
    "RideRequestRepository",
]

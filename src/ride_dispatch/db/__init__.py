"""Database persistence module."""

from .database import init_database
from .schema import Base, DriverLocation, DriverProfile, Notification, Ride, RideRequest, Vehicle
from .transaction import transaction

__all__ = [
    "init_database",
    "Base",
    "DriverProfile",
    "DriverLocation",
    "Vehicle",
    "RideRequest",
    "Ride",
    "Notification",
    "transaction",
]

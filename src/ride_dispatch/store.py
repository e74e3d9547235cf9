"""Storage interface consumed by the dispatch core.

Any backend that can answer these calls (a relational store with row-level
subscriptions in production, SQLite in tests) can drive matching and the
lifecycle guard. Implementations raise StorageError when the backend fails
and NotFoundError when an update targets a missing record.
"""

from datetime import datetime
from typing import Any, Protocol

from ride_dispatch.driver import DriverLocationSample, DriverStatus, Vehicle
from ride_dispatch.notification import Notification
from ride_dispatch.ride import Ride, RideRequest, RideRequestStatus
from ride_dispatch.service_class import ServiceClass


class DispatchStore(Protocol):
    # Driver locations and fleet
    def query_locations_since(self, since: datetime) -> list[DriverLocationSample]: ...

    def query_active_vehicles(
        self, driver_id: str, vehicle_class: ServiceClass
    ) -> list[Vehicle]: ...

    def upsert_location(self, sample: DriverLocationSample) -> None: ...

    def get_location(self, driver_id: str) -> DriverLocationSample | None: ...

    def set_driver_status(self, driver_id: str, status: DriverStatus) -> None: ...

    def claim_driver(self, driver_id: str) -> bool: ...

    def release_driver(self, driver_id: str) -> None: ...

    # Ride requests
    def get_ride_request(self, request_id: str) -> RideRequest | None: ...

    def create_ride_request(self, request: RideRequest) -> RideRequest: ...

    def update_ride_request(self, request_id: str, patch: dict[str, Any]) -> None: ...

    def list_ride_requests(
        self,
        status: RideRequestStatus,
        service_class: ServiceClass | None = None,
    ) -> list[RideRequest]: ...

    # Rides
    def get_ride(self, ride_id: str) -> Ride | None: ...

    def create_ride(self, ride: Ride) -> Ride: ...

    def accept_ride_request(self, request_id: str, ride: Ride) -> Ride: ...

    def has_active_ride(self, driver_id: str) -> bool: ...

    def update_ride(self, ride_id: str, patch: dict[str, Any]) -> None: ...

    def list_rides_for_request(self, request_id: str) -> list[Ride]: ...

    # Notifications
    def create_notification(self, notification: Notification) -> Notification: ...

    def list_notifications(
        self, recipient_id: str, unread_only: bool = False
    ) -> list[Notification]: ...

    def mark_notification_read(self, notification_id: str) -> None: ...

    def mark_all_notifications_read(self, recipient_id: str) -> int: ...

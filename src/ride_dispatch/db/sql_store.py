"""SQLAlchemy-backed implementation of the dispatch storage interface."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ride_dispatch.core.clock import Clock, SystemClock
from ride_dispatch.core.exceptions import NotFoundError, StorageError
from ride_dispatch.driver import DriverLocationSample, DriverStatus, Vehicle
from ride_dispatch.notification import Notification
from ride_dispatch.ride import Ride, RideRequest, RideRequestStatus
from ride_dispatch.service_class import ServiceClass

from .repositories import (
    DriverRepository,
    LocationRepository,
    NotificationRepository,
    RideRepository,
    RideRequestRepository,
)
from .transaction import transaction

logger = logging.getLogger(__name__)


class SqlDispatchStore:
    """Runs each storage operation in its own session and transaction."""

    def __init__(self, session_factory: sessionmaker[Session], clock: Clock | None = None):
        self._session_factory = session_factory
        self._clock = clock or SystemClock()

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        try:
            with self._session_factory() as session, transaction(session):
                yield session
        except SQLAlchemyError as e:
            logger.error(f"Storage operation {operation} failed: {e}")
            raise StorageError(
                f"Storage operation {operation} failed",
                details={"operation": operation},
            ) from e

    # --- Driver locations and fleet ---

    def query_locations_since(self, since: datetime) -> list[DriverLocationSample]:
        with self._session("query_locations_since") as session:
            return LocationRepository(session).list_since(since)

    def query_active_vehicles(self, driver_id: str, vehicle_class: ServiceClass) -> list[Vehicle]:
        with self._session("query_active_vehicles") as session:
            return DriverRepository(session).list_active_vehicles(driver_id, vehicle_class)

    def upsert_location(self, sample: DriverLocationSample) -> None:
        with self._session("upsert_location") as session:
            LocationRepository(session).upsert(sample)

    def get_location(self, driver_id: str) -> DriverLocationSample | None:
        with self._session("get_location") as session:
            return LocationRepository(session).get(driver_id)

    def set_driver_status(self, driver_id: str, status: DriverStatus) -> None:
        with self._session("set_driver_status") as session:
            if not LocationRepository(session).update_status(driver_id, status):
                raise NotFoundError(f"Driver {driver_id} has no reported location")

    def claim_driver(self, driver_id: str) -> bool:
        with self._session("claim_driver") as session:
            return LocationRepository(session).claim(driver_id)

    def release_driver(self, driver_id: str) -> None:
        with self._session("release_driver") as session:
            LocationRepository(session).update_status(driver_id, DriverStatus.ONLINE)

    def upsert_driver_profile(
        self, driver_id: str, rating: float, full_name: str | None = None
    ) -> None:
        with self._session("upsert_driver_profile") as session:
            DriverRepository(session).upsert_profile(driver_id, rating, full_name)

    def add_vehicle(self, vehicle: Vehicle) -> None:
        with self._session("add_vehicle") as session:
            DriverRepository(session).add_vehicle(vehicle)

    # --- Ride requests ---

    def get_ride_request(self, request_id: str) -> RideRequest | None:
        with self._session("get_ride_request") as session:
            return RideRequestRepository(session).get(request_id)

    def create_ride_request(self, request: RideRequest) -> RideRequest:
        now = self._clock.now()
        with self._session("create_ride_request") as session:
            repo = RideRequestRepository(session)
            repo.create(request, now)
            session.flush()
            return repo.get(request.request_id)  # type: ignore[return-value]

    def update_ride_request(self, request_id: str, patch: dict[str, Any]) -> None:
        with self._session("update_ride_request") as session:
            if not RideRequestRepository(session).update(request_id, patch, self._clock.now()):
                raise NotFoundError(f"Ride request {request_id} not found")

    def list_ride_requests(
        self,
        status: RideRequestStatus,
        service_class: ServiceClass | None = None,
    ) -> list[RideRequest]:
        with self._session("list_ride_requests") as session:
            return RideRequestRepository(session).list_by_status(status, service_class)

    # --- Rides ---

    def get_ride(self, ride_id: str) -> Ride | None:
        with self._session("get_ride") as session:
            return RideRepository(session).get(ride_id)

    def create_ride(self, ride: Ride) -> Ride:
        now = self._clock.now()
        with self._session("create_ride") as session:
            repo = RideRepository(session)
            repo.create(ride, now)
            session.flush()
            return repo.get(ride.ride_id)  # type: ignore[return-value]

    def accept_ride_request(self, request_id: str, ride: Ride) -> Ride:
        """Mark the request accepted and create its ride in one transaction."""
        now = self._clock.now()
        with self._session("accept_ride_request") as session:
            accepted = RideRequestRepository(session).update(
                request_id,
                {
                    "status": RideRequestStatus.ACCEPTED,
                    "offered_driver_id": None,
                    "offered_at": None,
                },
                now,
            )
            if not accepted:
                raise NotFoundError(f"Ride request {request_id} not found")
            repo = RideRepository(session)
            repo.create(ride, now)
            session.flush()
            return repo.get(ride.ride_id)  # type: ignore[return-value]

    def update_ride(self, ride_id: str, patch: dict[str, Any]) -> None:
        with self._session("update_ride") as session:
            if not RideRepository(session).update(ride_id, patch, self._clock.now()):
                raise NotFoundError(f"Ride {ride_id} not found")

    def list_rides_for_request(self, request_id: str) -> list[Ride]:
        with self._session("list_rides_for_request") as session:
            return RideRepository(session).list_by_request(request_id)

    def has_active_ride(self, driver_id: str) -> bool:
        with self._session("has_active_ride") as session:
            return RideRepository(session).has_active(driver_id)

    # --- Notifications ---

    def create_notification(self, notification: Notification) -> Notification:
        now = self._clock.now()
        with self._session("create_notification") as session:
            NotificationRepository(session).create(notification, now)
        return notification.model_copy(
            update={"created_at": notification.created_at or now}
        )

    def list_notifications(
        self, recipient_id: str, unread_only: bool = False
    ) -> list[Notification]:
        with self._session("list_notifications") as session:
            return NotificationRepository(session).list_for_recipient(recipient_id, unread_only)

    def mark_notification_read(self, notification_id: str) -> None:
        with self._session("mark_notification_read") as session:
            if not NotificationRepository(session).mark_read(notification_id):
                raise NotFoundError(f"Notification {notification_id} not found")

    def mark_all_notifications_read(self, recipient_id: str) -> int:
        with self._session("mark_all_notifications_read") as session:
            return NotificationRepository(session).mark_all_read(recipient_id)

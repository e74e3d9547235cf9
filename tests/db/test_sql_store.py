"""Tests for the SQLAlchemy-backed dispatch store."""

from datetime import timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from ride_dispatch.core.exceptions import NotFoundError, StorageError
from ride_dispatch.db.sql_store import SqlDispatchStore
from ride_dispatch.driver import DriverStatus
from ride_dispatch.notification import AlertPayload, Notification
from ride_dispatch.ride import Ride, RideRequestStatus, RideStatus
from ride_dispatch.service_class import ServiceClass


class TestLocations:
    def test_upsert_keeps_one_row_per_driver(self, store, clock, factory):
        now = clock.now()
        store.upsert_location(factory.location_sample(now - timedelta(minutes=3), driver_id="d1"))
        store.upsert_location(factory.location_sample(now, driver_id="d1", latitude=-23.6))

        samples = store.query_locations_since(now - timedelta(minutes=10))

        assert len(samples) == 1
        assert samples[0].latitude == -23.6
        assert samples[0].captured_at == now

    def test_query_since_is_most_recent_first(self, store, clock, factory):
        now = clock.now()
        store.upsert_location(factory.location_sample(now - timedelta(minutes=5), driver_id="old"))
        store.upsert_location(factory.location_sample(now - timedelta(minutes=1), driver_id="new"))
        store.upsert_location(factory.location_sample(now - timedelta(minutes=15), driver_id="gone"))

        samples = store.query_locations_since(now - timedelta(minutes=10))

        assert [s.driver_id for s in samples] == ["new", "old"]

    def test_rating_joined_from_profile(self, store, clock, factory):
        store.upsert_location(factory.location_sample(clock.now(), driver_id="rated"))
        store.upsert_location(factory.location_sample(clock.now(), driver_id="unrated"))
        store.upsert_driver_profile("rated", 4.6, "Ana Souza")

        ratings = {s.driver_id: s.rating for s in store.query_locations_since(clock.now())}

        assert ratings == {"rated": 4.6, "unrated": None}

    def test_claim_is_compare_and_swap(self, store, clock, factory):
        store.upsert_location(factory.location_sample(clock.now(), driver_id="d1"))

        assert store.claim_driver("d1") is True
        assert store.claim_driver("d1") is False
        assert store.get_location("d1").status == DriverStatus.BUSY

        store.release_driver("d1")

        assert store.claim_driver("d1") is True

    def test_claim_unknown_driver(self, store):
        assert store.claim_driver("ghost") is False

    def test_set_status_unknown_driver(self, store):
        with pytest.raises(NotFoundError):
            store.set_driver_status("ghost", DriverStatus.OFFLINE)


class TestVehicles:
    def test_active_vehicles_filtered_by_class(self, store, factory):
        store.add_vehicle(factory.vehicle("d1", ServiceClass.CAR, vehicle_id="car-1"))
        store.add_vehicle(factory.vehicle("d1", ServiceClass.MOTORCYCLE, vehicle_id="moto-1"))
        store.add_vehicle(factory.vehicle("d1", ServiceClass.CAR, vehicle_id="car-2", is_active=False))

        vehicles = store.query_active_vehicles("d1", ServiceClass.CAR)

        assert [v.vehicle_id for v in vehicles] == ["car-1"]


class TestRideRequests:
    def test_create_and_get(self, store, clock, factory):
        request = factory.ride_request(notes="Gate B")

        created = store.create_ride_request(request)

        assert created.created_at == clock.now()
        fetched = store.get_ride_request(request.request_id)
        assert fetched.pickup == request.pickup
        assert fetched.destination == request.destination
        assert fetched.notes == "Gate B"
        assert fetched.status == RideRequestStatus.PENDING

    def test_get_missing(self, store):
        assert store.get_ride_request("missing") is None

    def test_update(self, store, clock, factory):
        request = store.create_ride_request(factory.ride_request())
        clock.advance(minutes=2)

        store.update_ride_request(request.request_id, {"status": RideRequestStatus.ACCEPTED})

        fetched = store.get_ride_request(request.request_id)
        assert fetched.status == RideRequestStatus.ACCEPTED
        assert fetched.updated_at == clock.now()

    def test_update_missing(self, store):
        with pytest.raises(NotFoundError):
            store.update_ride_request("missing", {"notes": "x"})

    def test_update_rejects_unknown_fields(self, store, factory):
        request = store.create_ride_request(factory.ride_request())

        with pytest.raises(ValueError):
            store.update_ride_request(request.request_id, {"rider_id": "someone-else"})

        assert store.get_ride_request(request.request_id).rider_id == request.rider_id


class TestRides:
    def test_create_update_and_list(self, store, clock, factory):
        request = store.create_ride_request(factory.ride_request())
        ride = store.create_ride(Ride(ride_id="ride-1", request_id=request.request_id, driver_id="d1"))

        store.update_ride("ride-1", {"status": RideStatus.PICKED_UP, "pickup_time": clock.now()})

        assert ride.status == RideStatus.WAITING
        (listed,) = store.list_rides_for_request(request.request_id)
        assert listed.status == RideStatus.PICKED_UP
        assert listed.pickup_time == clock.now()

    def test_update_missing(self, store):
        with pytest.raises(NotFoundError):
            store.update_ride("missing", {"status": RideStatus.CANCELLED})

    def test_accept_writes_status_and_ride_together(self, store, clock, factory):
        request = store.create_ride_request(
            factory.ride_request(offered_driver_id="d1", offered_at=clock.now())
        )

        ride = store.accept_ride_request(
            request.request_id,
            Ride(ride_id="ride-1", request_id=request.request_id, driver_id="d1"),
        )

        assert ride.status == RideStatus.WAITING
        stored = store.get_ride_request(request.request_id)
        assert stored.status == RideRequestStatus.ACCEPTED
        assert stored.offered_driver_id is None
        assert stored.offered_at is None

    def test_accept_missing_request_creates_no_ride(self, store):
        with pytest.raises(NotFoundError):
            store.accept_ride_request(
                "missing", Ride(ride_id="ride-1", request_id="missing", driver_id="d1")
            )

        assert store.get_ride("ride-1") is None

    def test_accept_rolls_back_status_when_ride_insert_fails(self, store, factory):
        request = store.create_ride_request(factory.ride_request())
        store.create_ride(Ride(ride_id="ride-1", request_id="other-request", driver_id="d9"))

        # Duplicate primary key fails the insert after the status update
        with pytest.raises(StorageError):
            store.accept_ride_request(
                request.request_id,
                Ride(ride_id="ride-1", request_id=request.request_id, driver_id="d1"),
            )

        assert store.get_ride_request(request.request_id).status == RideRequestStatus.PENDING
        assert store.list_rides_for_request(request.request_id) == []

    def test_has_active_ride(self, store, factory):
        request = store.create_ride_request(factory.ride_request())
        store.create_ride(Ride(ride_id="ride-1", request_id=request.request_id, driver_id="d1"))

        assert store.has_active_ride("d1") is True
        assert store.has_active_ride("d2") is False

        store.update_ride("ride-1", {"status": RideStatus.CANCELLED})

        assert store.has_active_ride("d1") is False


class TestNotifications:
    def test_payload_round_trips_through_json(self, store):
        notification = Notification(
            notification_id="n1",
            recipient_id="rider-1",
            title="No Drivers Available",
            body="No drivers are currently available in your area. We'll keep looking!",
            payload=AlertPayload(request_id="req-1", reason="no drivers available"),
        )

        stored = store.create_notification(notification)

        assert stored.created_at is not None
        (listed,) = store.list_notifications("rider-1")
        assert isinstance(listed.payload, AlertPayload)
        assert listed.payload.request_id == "req-1"

    def test_mark_read_missing(self, store):
        with pytest.raises(NotFoundError):
            store.mark_notification_read("missing")


class TestStorageFailures:
    def test_sqlalchemy_errors_become_storage_errors(self, tmp_path, clock):
        # No schema created, every query fails with "no such table"
        engine = create_engine(f"sqlite:///{tmp_path / 'empty.db'}")
        broken = SqlDispatchStore(sessionmaker(bind=engine), clock)

        with pytest.raises(StorageError) as exc_info:
            broken.query_locations_since(clock.now())

        assert exc_info.value.details == {"operation": "query_locations_since"}
        assert exc_info.value.__cause__ is not None

    def test_write_failure_rolls_back(self, tmp_path, clock, factory):
        engine = create_engine(f"sqlite:///{tmp_path / 'empty.db'}")
        broken = SqlDispatchStore(sessionmaker(bind=engine), clock)

        with pytest.raises(StorageError):
            broken.create_ride_request(factory.ride_request())

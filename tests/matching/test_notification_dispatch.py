"""Tests for match-outcome notifications."""

from unittest.mock import Mock

import pytest

from ride_dispatch.matching import NotificationDispatch
from ride_dispatch.matching.notification_dispatch import NO_DRIVERS_MESSAGE, NO_DRIVERS_TITLE
from ride_dispatch.notification import AlertPayload, NewRideRequestPayload, NotificationType
from ride_dispatch.ride import GeoPoint
from ride_dispatch.service_class import ServiceClass


@pytest.fixture
def store():
    store = Mock()
    store.create_notification.side_effect = lambda notification: notification
    return store


@pytest.fixture
def dispatch(store):
    return NotificationDispatch(store)


class TestSendRideOffer:
    def test_offer_addressed_to_driver(self, dispatch, store, factory):
        request = factory.ride_request(service_class=ServiceClass.MOTORCYCLE)

        notification = dispatch.send_ride_offer("driver-1", request, 1.26, 6)

        store.create_notification.assert_called_once()
        assert notification.recipient_id == "driver-1"
        assert notification.type == NotificationType.NEW_RIDE_REQUEST
        assert notification.body == f"New motorcycle ride request from {request.pickup.address}"
        assert isinstance(notification.payload, NewRideRequestPayload)
        assert notification.payload.distance_km == 1.3
        assert notification.payload.estimated_fare == request.estimated_fare
        assert notification.read is False

    def test_offer_without_pickup_address(self, dispatch, factory):
        request = factory.ride_request(pickup=GeoPoint(latitude=0.0, longitude=0.0))

        notification = dispatch.send_ride_offer("driver-1", request, 0.5, 5)

        assert notification.body == "New car ride request from the pickup point"

    def test_each_notification_gets_fresh_id(self, dispatch, factory):
        request = factory.ride_request()

        first = dispatch.send_ride_offer("driver-1", request, 0.5, 5)
        second = dispatch.send_ride_offer("driver-1", request, 0.5, 5)

        assert first.notification_id != second.notification_id


class TestAlerts:
    def test_no_drivers_alert(self, dispatch, factory):
        request = factory.ride_request()

        notification = dispatch.notify_no_drivers(request)

        assert notification.recipient_id == request.rider_id
        assert notification.title == NO_DRIVERS_TITLE
        assert notification.body == NO_DRIVERS_MESSAGE
        assert isinstance(notification.payload, AlertPayload)
        assert notification.payload.request_id == request.request_id

    def test_matching_failed_alert(self, dispatch):
        notification = dispatch.notify_matching_failed("rider-1", "req-1")

        assert notification.type == NotificationType.ALERT
        assert notification.payload.reason == "matching failed"

    def test_store_errors_propagate(self, dispatch, store):
        store.create_notification.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError):
            dispatch.notify_matching_failed("rider-1", "req-1")

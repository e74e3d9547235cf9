"""Notification hand-off to the matched driver or the requester."""

import logging
from uuid import uuid4

from ride_dispatch.notification import AlertPayload, NewRideRequestPayload, Notification
from ride_dispatch.ride import RideRequest
from ride_dispatch.store import DispatchStore

logger = logging.getLogger(__name__)

NO_DRIVERS_TITLE = "No Drivers Available"
NO_DRIVERS_MESSAGE = "No drivers are currently available in your area. We'll keep looking!"
MATCHING_FAILED_TITLE = "Matching Failed"
MATCHING_FAILED_MESSAGE = "We couldn't look for a driver right now. Please try again."


class NotificationDispatch:
    """Writes match-outcome notifications through the store."""

    def __init__(self, store: DispatchStore):
        self._store = store

    def send_ride_offer(
        self,
        driver_id: str,
        request: RideRequest,
        distance_km: float,
        eta_minutes: int,
    ) -> Notification:
        """Offer the request to the chosen driver."""
        notification = Notification(
            notification_id=str(uuid4()),
            recipient_id=driver_id,
            title="New Ride Request",
            body=(
                f"New {request.service_class.value} ride request from "
                f"{request.pickup.address or 'the pickup point'}"
            ),
            payload=NewRideRequestPayload(
                request_id=request.request_id,
                pickup_address=request.pickup.address,
                destination_address=request.destination.address,
                estimated_fare=request.estimated_fare,
                service_class=request.service_class,
                distance_km=round(distance_km, 1),
                eta_minutes=eta_minutes,
            ),
        )
        logger.info(f"Sending ride offer for request {request.request_id} to driver {driver_id}")
        return self._store.create_notification(notification)

    def notify_no_drivers(self, request: RideRequest) -> Notification:
        """Tell the requester nobody is available."""
        return self._send_alert(
            request.rider_id,
            request.request_id,
            NO_DRIVERS_TITLE,
            NO_DRIVERS_MESSAGE,
            reason="no drivers available",
        )

    def notify_matching_failed(self, rider_id: str, request_id: str) -> Notification:
        """Tell the requester matching broke and they can retry."""
        return self._send_alert(
            rider_id,
            request_id,
            MATCHING_FAILED_TITLE,
            MATCHING_FAILED_MESSAGE,
            reason="matching failed",
        )

    def _send_alert(
        self, rider_id: str, request_id: str, title: str, body: str, reason: str
    ) -> Notification:
        notification = Notification(
            notification_id=str(uuid4()),
            recipient_id=rider_id,
            title=title,
            body=body,
            payload=AlertPayload(request_id=request_id, reason=reason),
        )
        logger.info(f"Alerting rider {rider_id} about request {request_id}: {reason}")
        return self._store.create_notification(notification)

"""Notification records written by the matching hand-off.

Payloads form a closed union keyed by ``type`` so consumers can match on every
notification kind.
"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter

from ride_dispatch.service_class import ServiceClass


class NotificationType(str, Enum):
    NEW_RIDE_REQUEST = "new_ride_request"
    ALERT = "alert"


class NewRideRequestPayload(BaseModel):
    """Offer sent to the matched driver."""

    type: Literal["new_ride_request"] = "new_ride_request"
    request_id: str
    pickup_address: str
    destination_address: str
    estimated_fare: float = Field(ge=0)
    service_class: ServiceClass
    distance_km: float = Field(ge=0)
    eta_minutes: int = Field(ge=0)


class AlertPayload(BaseModel):
    """Informational message to the requester when matching did not produce a driver."""

    type: Literal["alert"] = "alert"
    request_id: str
    reason: str


NotificationPayload = Annotated[
    NewRideRequestPayload | AlertPayload,
    Field(discriminator="type"),
]

payload_adapter: TypeAdapter[NewRideRequestPayload | AlertPayload] = TypeAdapter(
    NotificationPayload
)


class Notification(BaseModel):
    notification_id: str
    recipient_id: str
    title: str
    body: str
    payload: NotificationPayload
    read: bool = False
    created_at: datetime | None = None

    @property
    def type(self) -> NotificationType:
        return NotificationType(self.payload.type)

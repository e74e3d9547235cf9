from fastapi import APIRouter, Depends

from ride_dispatch.api.auth import verify_api_key
from ride_dispatch.api.dependencies import NotificationInboxDep
from ride_dispatch.api.models import MarkAllReadResponse
from ride_dispatch.notification import Notification

router = APIRouter(dependencies=[Depends(verify_api_key)])


@router.get("/users/{user_id}/notifications", response_model=list[Notification])
def list_notifications(user_id: str, inbox: NotificationInboxDep, unread_only: bool = False):
    return inbox.list_for_user(user_id, unread_only)


@router.post("/notifications/{notification_id}/read", status_code=204)
def mark_read(notification_id: str, inbox: NotificationInboxDep):
    inbox.mark_read(notification_id)


@router.post("/users/{user_id}/notifications/read-all", response_model=MarkAllReadResponse)
def mark_all_read(user_id: str, inbox: NotificationInboxDep):
    return MarkAllReadResponse(updated=inbox.mark_all_read(user_id))

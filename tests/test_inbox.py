"""Tests for the recipient notification inbox."""

import pytest

from ride_dispatch.core.exceptions import NotFoundError
from ride_dispatch.inbox import NotificationInbox
from ride_dispatch.matching import NotificationDispatch


@pytest.fixture
def inbox(store):
    return NotificationInbox(store)


@pytest.fixture
def alerts(store, clock, factory):
    dispatch = NotificationDispatch(store)
    request = factory.ride_request(rider_id="rider-1")
    first = dispatch.notify_no_drivers(request)
    clock.advance(minutes=1)
    second = dispatch.notify_matching_failed("rider-1", request.request_id)
    return first, second


def test_lists_newest_first(inbox, alerts):
    first, second = alerts

    listed = inbox.list_for_user("rider-1")

    assert [n.notification_id for n in listed] == [second.notification_id, first.notification_id]


def test_mark_read(inbox, alerts):
    first, second = alerts

    inbox.mark_read(first.notification_id)

    unread = inbox.list_for_user("rider-1", unread_only=True)
    assert [n.notification_id for n in unread] == [second.notification_id]


def test_mark_all_read(inbox, alerts):
    assert inbox.mark_all_read("rider-1") == 2
    assert inbox.list_for_user("rider-1", unread_only=True) == []
    assert inbox.mark_all_read("rider-1") == 0


def test_mark_read_unknown(inbox):
    with pytest.raises(NotFoundError):
        inbox.mark_read("missing")


def test_other_users_untouched(inbox, alerts):
    assert inbox.list_for_user("rider-2") == []

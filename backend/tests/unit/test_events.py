"""
Unit tests for the booking event bus.
"""
import pytest

from laundry.lib.events import (
    BOOKING_CREATED,
    BOOKING_UPDATED,
    BookingEventBus,
    build_event,
    get_event_bus,
)


@pytest.mark.unit
def test_build_event_envelope():
    event = build_event(BOOKING_CREATED, {"booking_id": "b-1"})

    assert event["event_type"] == "booking.created"
    assert event["data"] == {"booking_id": "b-1"}
    assert event["event_id"]
    assert event["occurred_at"]


@pytest.mark.unit
def test_publish_reaches_every_subscriber_in_order():
    bus = BookingEventBus()
    calls = []
    bus.subscribe(lambda e: calls.append(("first", e["event_type"])))
    bus.subscribe(lambda e: calls.append(("second", e["event_type"])))

    event = bus.publish(BOOKING_UPDATED, "b-1")

    assert calls == [("first", "booking.updated"), ("second", "booking.updated")]
    assert event["data"] == {"booking_id": "b-1"}


@pytest.mark.unit
def test_failing_listener_does_not_stop_delivery():
    bus = BookingEventBus()
    received = []

    def broken(event):
        raise RuntimeError("listener crashed")

    bus.subscribe(broken)
    bus.subscribe(received.append)

    bus.publish(BOOKING_CREATED)

    assert len(received) == 1
    assert received[0]["data"] == {}


@pytest.mark.unit
def test_unsubscribe_callable():
    bus = BookingEventBus()
    received = []
    unsubscribe = bus.subscribe(received.append)
    assert bus.listener_count == 1

    unsubscribe()
    unsubscribe()
    bus.publish(BOOKING_CREATED)

    assert received == []
    assert bus.listener_count == 0


@pytest.mark.unit
def test_get_event_bus_is_singleton():
    assert get_event_bus() is get_event_bus()

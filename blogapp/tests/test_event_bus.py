import pytest

from blogapp.backend.responses import AuthChangeEvent
from blogapp.core.events.event_bus import ALL_EVENTS, EventBus

pytestmark = pytest.mark.unit


def test_typed_and_wildcard_subscribers_receive_events():
    bus = EventBus()
    typed, everything = [], []
    bus.subscribe("SIGNED_IN", lambda event: typed.append(event.event_type))
    bus.subscribe(ALL_EVENTS, lambda event: everything.append(event.event_type))

    bus.publish(AuthChangeEvent("SIGNED_IN", None))
    bus.publish(AuthChangeEvent("SIGNED_OUT", None))

    assert typed == ["SIGNED_IN"]
    assert everything == ["SIGNED_IN", "SIGNED_OUT"]


def test_handler_can_unsubscribe_while_notified():
    bus = EventBus()
    received = []

    def once(event):
        received.append(event.event_type)
        unsubscribe()

    unsubscribe = bus.subscribe(ALL_EVENTS, once)
    bus.publish(AuthChangeEvent("SIGNED_IN", None))
    bus.publish(AuthChangeEvent("SIGNED_OUT", None))

    assert received == ["SIGNED_IN"]
    assert bus.subscriber_count() == 0

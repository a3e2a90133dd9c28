import pytest

from event_bus import CLUE_COLLECTED, QUESTION_UNLOCKED, EventBus


def test_handlers_called_in_subscription_order():
    bus = EventBus()
    calls = []
    bus.subscribe(CLUE_COLLECTED, lambda p: calls.append(("a", p["n"])))
    bus.subscribe(CLUE_COLLECTED, lambda p: calls.append(("b", p["n"])))

    bus.publish(CLUE_COLLECTED, {"n": 1})

    assert calls == [("a", 1), ("b", 1)]


def test_publish_without_subscribers_is_a_noop():
    EventBus().publish(QUESTION_UNLOCKED, {"suspect_id": "x"})


def test_publish_defaults_to_empty_payload():
    bus = EventBus()
    seen = []
    bus.subscribe("case:completed", seen.append)
    bus.publish("case:completed")
    assert seen == [{}]


def test_unsubscribe():
    bus = EventBus()
    calls = []
    handler = bus.subscribe(CLUE_COLLECTED, calls.append)

    assert bus.unsubscribe(CLUE_COLLECTED, handler) is True
    assert bus.unsubscribe(CLUE_COLLECTED, handler) is False
    bus.publish(CLUE_COLLECTED, {"n": 1})

    assert calls == []
    assert bus.subscriber_count(CLUE_COLLECTED) == 0


def test_handler_may_unsubscribe_itself_during_delivery():
    bus = EventBus()
    calls = []

    def once(payload):
        calls.append("once")
        bus.unsubscribe(CLUE_COLLECTED, once)

    bus.subscribe(CLUE_COLLECTED, once)
    bus.subscribe(CLUE_COLLECTED, lambda p: calls.append("always"))

    bus.publish(CLUE_COLLECTED, {})
    bus.publish(CLUE_COLLECTED, {})

    assert calls == ["once", "always", "always"]


def test_handler_errors_propagate():
    bus = EventBus()

    def boom(payload):
        raise RuntimeError("handler failed")

    bus.subscribe(CLUE_COLLECTED, boom)
    with pytest.raises(RuntimeError):
        bus.publish(CLUE_COLLECTED, {})


def test_clear():
    bus = EventBus()
    bus.subscribe(CLUE_COLLECTED, lambda p: None)
    bus.subscribe(QUESTION_UNLOCKED, lambda p: None)
    bus.clear()
    assert bus.subscriber_count(CLUE_COLLECTED) == 0
    assert bus.subscriber_count(QUESTION_UNLOCKED) == 0

from dragtreelib.events import GESTURE_CANCEL, GESTURE_EVENTS, GESTURE_START, EventBus


def test_emit_calls_handlers_in_order():
    bus = EventBus()
    calls = []
    bus.subscribe("gesture.start", lambda **d: calls.append(("first", d)))
    bus.subscribe("gesture.start", lambda **d: calls.append(("second", d)))
    bus.emit("gesture.start", element_id="a")
    assert calls == [("first", {"element_id": "a"}), ("second", {"element_id": "a"})]


def test_unsubscribe_and_clear():
    bus = EventBus()
    calls = []

    def handler(**data):
        calls.append(data)

    bus.subscribe("gesture.commit", handler)
    bus.unsubscribe("gesture.commit", handler)
    bus.unsubscribe("gesture.commit", handler)  # already gone
    bus.emit("gesture.commit", changed=True)
    assert calls == []

    bus.subscribe("gesture.commit", handler)
    bus.subscribe("gesture.cancel", handler)
    bus.clear("gesture.commit")
    bus.emit("gesture.commit")
    bus.emit("gesture.cancel", element_id="x")
    assert calls == [{"element_id": "x"}]

    bus.clear()
    bus.emit("gesture.cancel")
    assert calls == [{"element_id": "x"}]


def test_handler_may_unsubscribe_itself():
    bus = EventBus()
    calls = []

    def once(**data):
        calls.append(data)
        bus.unsubscribe("gesture.preview", once)

    bus.subscribe("gesture.preview", once)
    bus.emit("gesture.preview", n=1)
    bus.emit("gesture.preview", n=2)
    assert calls == [{"n": 1}]


def test_session_event_names():
    assert GESTURE_EVENTS == (
        "gesture.start", "gesture.preview", "gesture.commit", "gesture.cancel")
    assert (GESTURE_START, GESTURE_CANCEL) == ("gesture.start", "gesture.cancel")

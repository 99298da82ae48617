import logging

from hashconnect import Event, EventBus, RelayMessageType


def test_emit_in_subscription_order():
    ev = Event("x")
    seen = []
    ev.on(lambda v: seen.append(("a", v)))
    ev.on(lambda v: seen.append(("b", v)))
    assert ev.emit(1) == 2
    assert seen == [("a", 1), ("b", 1)]


def test_subscriber_added_during_emit_waits_for_next():
    ev = Event("x")
    late = []

    def first(v):
        ev.on(late.append)

    ev.on(first)
    ev.emit(1)
    assert late == []
    ev.emit(2)
    assert late == [2]


def test_no_buffering():
    ev = Event("x")
    assert ev.emit("lost") == 0
    seen = []
    ev.on(seen.append)
    assert seen == []


def test_failing_handler_does_not_stop_others(caplog):
    ev = Event("x")
    seen = []

    def boom(v):
        raise RuntimeError("boom")

    ev.on(boom)
    ev.on(seen.append)
    with caplog.at_level(logging.ERROR, logger="hashconnect.events"):
        ev.emit(5)
    assert seen == [5]
    assert "boom" in caplog.text


def test_off():
    ev = Event("x")
    seen = []
    ev.on(seen.append)
    ev.off(seen.append)
    ev.off(seen.append)
    ev.emit(1)
    assert seen == []
    assert len(ev) == 0


def test_on_works_as_decorator():
    ev = Event("x")

    @ev.on
    def handler(v):
        pass

    assert len(ev) == 1


def test_every_message_type_has_its_own_channel():
    bus = EventBus()
    channels = [bus.channel_for(t) for t in RelayMessageType]
    assert all(c is not None for c in channels)
    assert len({id(c) for c in channels}) == len(channels)
    assert bus.channel_for(RelayMessageType.ACKNOWLEDGE) is bus.acknowledge


def test_buses_do_not_share_channels():
    a, b = EventBus(), EventBus()
    assert a.pairing is not b.pairing
    assert set(a.channels()) == {
        "found_extension", "pairing", "transaction", "transaction_response",
        "acknowledge", "additional_account_request", "additional_account_response", "rejected",
    }

import threading

from peerchat.display import MessageLog
from peerchat.events import ERROR, LOCAL, MESSAGE, SYSTEM, ChatEvent
from peerchat.errors import DecodeError


def test_local_echo_skipped_when_already_last_entry():
    log = MessageLog()
    assert log.apply(ChatEvent(LOCAL, "alice: hi")) is True
    assert log.apply(ChatEvent(LOCAL, "alice: hi")) is False
    assert log.entries() == ["alice: hi"]


def test_local_echo_added_again_after_other_entry():
    log = MessageLog()
    log.apply(ChatEvent(LOCAL, "alice: hi"))
    log.apply(ChatEvent(MESSAGE, "bob: yo"))
    log.apply(ChatEvent(LOCAL, "alice: hi"))
    assert log.entries() == ["alice: hi", "bob: yo", "alice: hi"]


def test_peer_messages_are_always_appended():
    log = MessageLog()
    log.apply(ChatEvent(MESSAGE, "bob: yo"))
    log.apply(ChatEvent(MESSAGE, "bob: yo"))
    assert len(log) == 2


def test_non_text_events_are_ignored():
    log = MessageLog()
    assert log.apply(ChatEvent(SYSTEM, "Chat started.")) is False
    assert log.apply(ChatEvent.failure(DecodeError("bad"))) is False
    assert log.entries() == []


def test_concurrent_appends_are_not_lost():
    log = MessageLog()

    def writer(tag):
        for i in range(200):
            log.append(f"{tag}{i}")

    threads = [threading.Thread(target=writer, args=(t,)) for t in "abcd"]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(log) == 800


def test_failure_event_carries_error():
    exc = DecodeError("bad bytes")
    event = ChatEvent.failure(exc)
    assert event.kind == ERROR and event.is_error
    assert event.error is exc and event.text == "bad bytes"

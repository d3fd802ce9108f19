import logging

from peerchat.errors import DecodeError
from peerchat.events import ERROR, MESSAGE
from peerchat.receiver import ReceiveLoop

ADDR = ("127.0.0.1", 40000)


def make_loop(username="alice"):
    published = []
    return ReceiveLoop(sock=None, username=username, publish=published.append), published


def test_foreign_message_delivered_unchanged():
    loop, published = make_loop()
    event = loop.handle_datagram("bob:  spaced  out ".encode(), ADDR)
    assert event.kind == MESSAGE
    assert published == [event]
    assert event.text == "bob:  spaced  out "


def test_own_prefix_is_dropped():
    loop, published = make_loop()
    assert loop.handle_datagram(b"alice: hello", ADDR) is None
    assert loop.handle_datagram(b"alice:no space", ADDR) is None
    assert published == []


def test_similar_name_is_not_treated_as_own():
    loop, published = make_loop()
    loop.handle_datagram(b"alice2: hello", ADDR)
    assert [e.text for e in published] == ["alice2: hello"]


def test_text_without_prefix_is_delivered():
    loop, published = make_loop()
    loop.handle_datagram("plain text ✓".encode(), ADDR)
    assert published[0].text == "plain text ✓"


def test_malformed_utf8_reported_as_decode_error(caplog):
    loop, published = make_loop()
    with caplog.at_level(logging.WARNING, logger="peerchat"):
        event = loop.handle_datagram(b"bob: \xc3\x28", ADDR)
    assert event.kind == ERROR
    assert isinstance(event.error, DecodeError)
    assert "127.0.0.1:40000" in event.text
    assert published == [event]
    assert "Malformed datagram" in caplog.text


def test_stop_before_start_is_harmless():
    loop, _ = make_loop()
    loop.stop()
    assert not loop.is_alive

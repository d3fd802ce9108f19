import socket

import pytest

from peerchat.errors import ConfigError
from peerchat.protocol import (
    DEFAULT_ADDRESS, SessionConfig, address_family, compose_message,
    decode_message, encode_message, is_own_message, parse_port,
)


def test_compose_message_prefixes_username():
    assert compose_message("alice", "hello") == "alice: hello"


def test_encode_message_is_utf8():
    assert encode_message("bob: привет") == "bob: привет".encode("utf-8")


def test_decode_message_rejects_malformed_bytes():
    with pytest.raises(UnicodeDecodeError):
        decode_message(b"\xff\xfe\xfa")


@pytest.mark.parametrize("text, expected", [
    ("alice: hi", True),
    ("alice:hi", True),
    ("alicex: hi", False),
    ("bob: alice: hi", False),
    ("Alice: hi", False),
    (" alice: hi", False),
])
def test_is_own_message_is_exact_prefix_match(text, expected):
    assert is_own_message(text, "alice") is expected


def test_from_input_parses_strings_and_trims_username():
    config = SessionConfig.from_input("  alice ", "5000", " 5001 ")
    assert config == SessionConfig("alice", 5000, 5001)
    assert config.remote_address == DEFAULT_ADDRESS
    assert config.remote_endpoint == ("127.0.0.1", 5001)
    assert config.local_endpoint == ("127.0.0.1", 5000)


@pytest.mark.parametrize("username", ["", "   ", None])
def test_blank_username_is_rejected(username):
    with pytest.raises(ConfigError):
        SessionConfig.from_input(username, 5000, 5001)


@pytest.mark.parametrize("port", ["", "abc", "0", "65536", "-1", "50.5"])
def test_bad_ports_are_rejected(port):
    with pytest.raises(ConfigError):
        parse_port(port, "local")


def test_bad_remote_address_is_rejected():
    with pytest.raises(ConfigError):
        SessionConfig.from_input("alice", 5000, 5001, remote_address="not-an-ip")


def test_validated_catches_directly_built_config():
    with pytest.raises(ConfigError):
        SessionConfig("alice", 5000, 70000).validated()


def test_address_family_follows_ip_version():
    assert address_family("127.0.0.1") == socket.AF_INET
    assert address_family("::1") == socket.AF_INET6

import socket

import pytest

from netbench.settings import (
    MAX_BLOCKSIZE,
    MAX_BURST,
    MAX_MSS,
    MAX_TCP_BUFFER,
    MAX_UDP_BLOCKSIZE,
    DebugLevel,
    Mode,
    Settings,
)


def test_source_limits_are_accepted_by_validation():
    settings = Settings(socket_bufsize=MAX_TCP_BUFFER, blksize=MAX_UDP_BLOCKSIZE)
    validated = settings.validate()
    assert validated.socket_bufsize == 512 * 1024 * 1024
    assert validated.blksize == 65535 - 8 - 20


def test_mode_lookup_by_value():
    assert Mode(-1) is Mode.BIDIRECTIONAL
    assert Mode(1) is Mode.SENDER
    assert Mode(0) is Mode.RECEIVER


def test_debug_level_max_is_alias_of_debug():
    assert DebugLevel.MAX is DebugLevel.DEBUG
    assert DebugLevel(4) is DebugLevel.DEBUG
    assert DebugLevel.ERROR < DebugLevel.WARN < DebugLevel.INFO < DebugLevel.DEBUG


def test_defaults_validate_and_return_self():
    settings = Settings()
    assert settings.validate() is settings
    assert settings.unit_format == "a"
    assert settings.unit_precision == -1


def test_limits_themselves_are_accepted():
    settings = Settings(
        domain=socket.AF_INET6,
        socket_bufsize=MAX_TCP_BUFFER,
        blksize=MAX_BLOCKSIZE,
        burst=MAX_BURST,
        mss=MAX_MSS,
        tos=255,
        flowlabel=0xFFFFF,
        unit_format="G",
        unit_precision=3,
    )
    assert settings.validate() is settings


@pytest.mark.parametrize(
    "field, value",
    [
        ("socket_bufsize", MAX_TCP_BUFFER + 1),
        ("blksize", MAX_BLOCKSIZE + 1),
        ("burst", MAX_BURST + 1),
        ("mss", MAX_MSS + 1),
        ("tos", 256),
        ("ttl", -1),
        ("flowlabel", 0x100000),
        ("rate", -1),
        ("pacing_timer", -5),
        ("idle_timeout", -1),
        ("cntl_ka_count", -1),
    ],
)
def test_out_of_range_values_rejected(field, value):
    settings = Settings(**{field: value})
    with pytest.raises(ValueError, match=field):
        settings.validate()


def test_unknown_unit_format_rejected():
    with pytest.raises(ValueError, match="unit format"):
        Settings(unit_format="x").validate()


def test_bad_precision_rejected():
    with pytest.raises(ValueError, match="unit_precision"):
        Settings(unit_precision=-2).validate()


def test_connect_timeout_minus_one_allowed_lower_rejected():
    assert Settings(connect_timeout=-1).validate().connect_timeout == -1
    with pytest.raises(ValueError, match="connect_timeout"):
        Settings(connect_timeout=-2).validate()


def test_bytes_and_blocks_are_exclusive():
    assert Settings(bytes=100).validate().bytes == 100
    with pytest.raises(ValueError, match="bytes and blocks"):
        Settings(bytes=100, blocks=3).validate()


def test_unsupported_domain_rejected():
    with pytest.raises(ValueError, match="address family"):
        Settings(domain=12345).validate()
"""Per-test settings, run modes and the limits used to sanity-check them."""

from __future__ import annotations

import socket
from dataclasses import dataclass
from enum import IntEnum

DEFAULT_PORT = 5201
UDP_RATE = 1024 * 1024
OMIT = 0
DURATION = 10

US_TO_NS = 1000
MS_TO_US = 1000
SEC_TO_MS = 1000
SEC_TO_US = 1_000_000
SEC_TO_NS = 1_000_000_000

MAX_RESULT_STRING = 4096
UDP_BUFFER_EXTRA = 1024
MAX_PARAMS_JSON_STRING = 8 * 1024

MB = 1024 * 1024
MAX_TCP_BUFFER = 512 * MB
MAX_BLOCKSIZE = MB
MIN_UDP_BLOCKSIZE = 4 + 4 + 8
MAX_UDP_BLOCKSIZE = 65535 - 8 - 20
MIN_INTERVAL = 0.1
MAX_INTERVAL = 60.0
MAX_TIME = 86400
MAX_OMIT_TIME = 600
MAX_BURST = 1000
MAX_MSS = 9 * 1024
MAX_STREAMS = 128

COOKIE_SIZE = 37
TIMESTAMP_FORMAT = "%c "

UDP_CONNECT_MSG = 0x36373839
UDP_CONNECT_REPLY = 0x39383736
LEGACY_UDP_CONNECT_REPLY = 987654321
MAX_REVERSE_OUT_OF_ORDER_PACKETS = 2

MAX_FLOWLABEL = 0x000FFFFF
UNIT_FORMATS = frozenset("bkmgtaBKMGTA")

_DOMAINS = frozenset({socket.AF_UNSPEC, socket.AF_INET, socket.AF_INET6})


class Mode(IntEnum):
    """Direction of the data flow as seen from the client."""

    SENDER = 1
    RECEIVER = 0
    BIDIRECTIONAL = -1


class DebugLevel(IntEnum):
    """How much debug output to show."""

    ERROR = 1
    WARN = 2
    INFO = 3
    DEBUG = 4
    MAX = 4


@dataclass
class Settings:
    """Options that describe how a test's streams move data.

    Sizes are in bytes, rates in bits per second, ``connect_timeout`` in
    milliseconds, ``pacing_timer``, ``snd_timeout`` and ``rcv_timeout`` in
    microseconds and ``idle_timeout`` in seconds. Zero in a size or limit
    means "not set"; -1 in ``connect_timeout`` means "wait forever".
    """

    domain: int = socket.AF_UNSPEC
    socket_bufsize: int = 0
    blksize: int = 0
    buflen: int = 0
    rate: int = 0
    bitrate_limit: int = 0
    bitrate_limit_interval: float = 0.0
    bitrate_limit_stats_per_interval: int = 0
    fqrate: int = 0
    pacing_timer: int = 0
    burst: int = 0
    mss: int = 0
    ttl: int = 0
    tos: int = 0
    flowlabel: int = 0
    bytes: int = 0
    blocks: int = 0
    unit_format: str = "a"
    unit_precision: int = -1
    num_ostreams: int = 0
    dont_fragment: bool = False
    skip_rx_copy: bool = False
    connect_timeout: int = -1
    idle_timeout: int = 0
    snd_timeout: int = 0
    rcv_timeout: int = 0
    cntl_ka: bool = False
    cntl_ka_keepidle: int = 0
    cntl_ka_interval: int = 0
    cntl_ka_count: int = 0

    def validate(self) -> "Settings":
        """Check every value against its allowed range; return ``self``.

        Raises :class:`ValueError` naming the first field that is out of range.
        """
        if self.domain not in _DOMAINS:
            raise ValueError(f"unsupported address family {self.domain}")
        _in_range("socket_bufsize", self.socket_bufsize, 0, MAX_TCP_BUFFER)
        _in_range("blksize", self.blksize, 0, MAX_BLOCKSIZE)
        _in_range("buflen", self.buflen, 0, MAX_TCP_BUFFER)
        _non_negative("rate", self.rate)
        _non_negative("bitrate_limit", self.bitrate_limit)
        _non_negative("bitrate_limit_interval", self.bitrate_limit_interval)
        _non_negative(
            "bitrate_limit_stats_per_interval", self.bitrate_limit_stats_per_interval
        )
        _non_negative("fqrate", self.fqrate)
        _non_negative("pacing_timer", self.pacing_timer)
        _in_range("burst", self.burst, 0, MAX_BURST)
        _in_range("mss", self.mss, 0, MAX_MSS)
        _in_range("ttl", self.ttl, 0, 255)
        _in_range("tos", self.tos, 0, 255)
        _in_range("flowlabel", self.flowlabel, 0, MAX_FLOWLABEL)
        _non_negative("bytes", self.bytes)
        _non_negative("blocks", self.blocks)
        if self.bytes and self.blocks:
            raise ValueError("only one of bytes and blocks may be set")
        if not isinstance(self.unit_format, str) or self.unit_format not in UNIT_FORMATS:
            raise ValueError(f"unknown unit format {self.unit_format!r}")
        if self.unit_precision < -1:
            raise ValueError(
                f"unit_precision must be -1 or non-negative, got {self.unit_precision}"
            )
        _non_negative("num_ostreams", self.num_ostreams)
        if self.connect_timeout < -1:
            raise ValueError(
                f"connect_timeout must be -1 or non-negative, got {self.connect_timeout}"
            )
        _non_negative("idle_timeout", self.idle_timeout)
        _non_negative("snd_timeout", self.snd_timeout)
        _non_negative("rcv_timeout", self.rcv_timeout)
        _non_negative("cntl_ka_keepidle", self.cntl_ka_keepidle)
        _non_negative("cntl_ka_interval", self.cntl_ka_interval)
        _non_negative("cntl_ka_count", self.cntl_ka_count)
        return self


def _non_negative(name: str, value: float) -> None:
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")


def _in_range(name: str, value: int, low: int, high: int) -> None:
    if not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high}, got {value}")
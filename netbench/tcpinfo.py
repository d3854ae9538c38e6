"""Kernel TCP statistics (TCP_INFO) for a connected socket."""

from __future__ import annotations

import errno
import os
import socket
import struct
import sys
from dataclasses import dataclass, fields
from typing import Optional

_HEADER_FIELDS = ("state", "ca_state", "retransmits", "probes", "backoff", "options")

_BASE_FIELDS = (
    "rto",
    "ato",
    "snd_mss",
    "rcv_mss",
    "unacked",
    "sacked",
    "lost",
    "retrans",
    "fackets",
    "last_data_sent",
    "last_ack_sent",
    "last_data_recv",
    "last_ack_recv",
    "pmtu",
    "rcv_ssthresh",
    "rtt",
    "rttvar",
    "snd_ssthresh",
    "snd_cwnd",
    "advmss",
    "reordering",
    "rcv_rtt",
    "rcv_space",
    "total_retrans",
)
_BASE_OFFSET = 8
BASE_SIZE = _BASE_OFFSET + 4 * len(_BASE_FIELDS)

# Fields added by later kernels: (name, struct code, offset).
_EXTENDED_FIELDS = (
    ("pacing_rate", "Q", 104),
    ("max_pacing_rate", "Q", 112),
    ("bytes_acked", "Q", 120),
    ("bytes_received", "Q", 128),
    ("segs_out", "I", 136),
    ("segs_in", "I", 140),
    ("notsent_bytes", "I", 144),
    ("min_rtt", "I", 148),
    ("data_segs_in", "I", 152),
    ("data_segs_out", "I", 156),
    ("delivery_rate", "Q", 160),
    ("busy_time", "Q", 168),
    ("rwnd_limited", "Q", 176),
    ("sndbuf_limited", "Q", 184),
    ("delivered", "I", 192),
    ("delivered_ce", "I", 196),
    ("bytes_sent", "Q", 200),
    ("bytes_retrans", "Q", 208),
    ("dsack_dups", "I", 216),
    ("reord_seen", "I", 220),
    ("rcv_ooopack", "I", 224),
    ("snd_wnd", "I", 228),
)
FULL_SIZE = 232


def has_tcpinfo() -> bool:
    """Tell whether TCP_INFO statistics can be read on this platform."""
    return sys.platform.startswith("linux") and hasattr(socket, "TCP_INFO")


def has_tcpinfo_retransmits() -> bool:
    """Tell whether the statistics include a total retransmission count."""
    return has_tcpinfo()


@dataclass(frozen=True)
class TcpInfo:
    """A snapshot of the kernel's TCP statistics for one connection.

    Fields missing from an older kernel's answer are ``None``.
    """

    state: int = 0
    ca_state: int = 0
    retransmits: int = 0
    probes: int = 0
    backoff: int = 0
    options: int = 0
    rto: int = 0
    ato: int = 0
    snd_mss: int = 0
    rcv_mss: int = 0
    unacked: int = 0
    sacked: int = 0
    lost: int = 0
    retrans: int = 0
    fackets: int = 0
    last_data_sent: int = 0
    last_ack_sent: int = 0
    last_data_recv: int = 0
    last_ack_recv: int = 0
    pmtu: int = 0
    rcv_ssthresh: int = 0
    rtt: int = 0
    rttvar: int = 0
    snd_ssthresh: int = 0
    snd_cwnd: int = 0
    advmss: int = 0
    reordering: int = 0
    rcv_rtt: int = 0
    rcv_space: int = 0
    total_retrans: int = 0
    pacing_rate: Optional[int] = None
    max_pacing_rate: Optional[int] = None
    bytes_acked: Optional[int] = None
    bytes_received: Optional[int] = None
    segs_out: Optional[int] = None
    segs_in: Optional[int] = None
    notsent_bytes: Optional[int] = None
    min_rtt: Optional[int] = None
    data_segs_in: Optional[int] = None
    data_segs_out: Optional[int] = None
    delivery_rate: Optional[int] = None
    busy_time: Optional[int] = None
    rwnd_limited: Optional[int] = None
    sndbuf_limited: Optional[int] = None
    delivered: Optional[int] = None
    delivered_ce: Optional[int] = None
    bytes_sent: Optional[int] = None
    bytes_retrans: Optional[int] = None
    dsack_dups: Optional[int] = None
    reord_seen: Optional[int] = None
    rcv_ooopack: Optional[int] = None
    snd_wnd: Optional[int] = None

    @classmethod
    def from_bytes(cls, data: bytes) -> "TcpInfo":
        """Decode the raw ``struct tcp_info`` returned by the kernel."""
        if len(data) < BASE_SIZE:
            raise ValueError(
                f"tcp_info needs at least {BASE_SIZE} bytes, got {len(data)}"
            )
        values = dict(zip(_HEADER_FIELDS, struct.unpack_from("=6B", data, 0)))
        base = struct.unpack_from(f"={len(_BASE_FIELDS)}I", data, _BASE_OFFSET)
        values.update(zip(_BASE_FIELDS, base))
        for name, code, offset in _EXTENDED_FIELDS:
            if offset + struct.calcsize(code) <= len(data):
                (values[name],) = struct.unpack_from("=" + code, data, offset)
        return cls(**values)

    def as_dict(self) -> dict:
        """Return the statistics as a plain dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def total_retransmits(self) -> int:
        """Number of segments retransmitted over the connection's life."""
        return self.total_retrans

    def snd_cwnd_bytes(self) -> int:
        """Congestion window in bytes."""
        return self.snd_cwnd * self.snd_mss

    def snd_wnd_bytes(self) -> int:
        """Peer's advertised send window in bytes, or -1 if unknown."""
        return -1 if self.snd_wnd is None else self.snd_wnd

    def rtt_usecs(self) -> int:
        """Smoothed round-trip time in microseconds."""
        return self.rtt

    def rttvar_usecs(self) -> int:
        """Round-trip time variance in microseconds."""
        return self.rttvar

    def path_mtu(self) -> int:
        """Path MTU in bytes."""
        return self.pmtu

    def reorder_seen(self) -> int:
        """Number of reordering events seen, or -1 if unknown."""
        return -1 if self.reord_seen is None else self.reord_seen

    def message(self) -> str:
        """A one-line summary of the congestion-related statistics."""
        return (
            f"CWND={self.snd_cwnd} SND_SSTHRESH={self.snd_ssthresh} "
            f"RCV_SSTHRESH={self.rcv_ssthresh} UNACKED={self.unacked} "
            f"SACK={self.sacked} LOST={self.lost} RETRANS={self.retrans} "
            f"FACK={self.fackets} RTT={self.rtt} REORDERING={self.reordering}"
        )


def read_tcpinfo(sock: socket.socket) -> TcpInfo:
    """Read the current TCP statistics of ``sock``.

    Raises :class:`OSError` when the platform has no TCP_INFO or the
    socket cannot be queried.
    """
    if sock.fileno() < 0:
        raise OSError(errno.EBADF, os.strerror(errno.EBADF))
    if not has_tcpinfo():
        raise OSError(errno.ENOPROTOOPT, "TCP_INFO is not supported on this platform")
    data = sock.getsockopt(socket.IPPROTO_TCP, socket.TCP_INFO, FULL_SIZE)
    return TcpInfo.from_bytes(data)
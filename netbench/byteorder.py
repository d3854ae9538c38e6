"""64-bit network byte order conversion and IPv6 flow-information fields."""

from __future__ import annotations

IPV6_FL_A_GET = 0
IPV6_FL_A_PUT = 1
IPV6_FL_A_RENEW = 2

IPV6_FL_F_CREATE = 1
IPV6_FL_F_EXCL = 2

IPV6_FL_S_NONE = 0
IPV6_FL_S_EXCL = 1
IPV6_FL_S_PROCESS = 2
IPV6_FL_S_USER = 3
IPV6_FL_S_ANY = 255

IPV6_FLOWINFO_FLOWLABEL = 0x000FFFFF
IPV6_FLOWINFO_PRIORITY = 0x0FF00000

IPV6_FLOWLABEL_MGR = 32
IPV6_FLOWINFO_SEND = 33

_PRIORITY_SHIFT = 20
_U64_MAX = 2**64 - 1
_U32_MAX = 2**32 - 1


def hton64(value: int) -> bytes:
    """Encode an unsigned 64-bit integer as 8 bytes in network (big-endian) order."""
    if not 0 <= value <= _U64_MAX:
        raise ValueError(f"value {value} does not fit in 64 unsigned bits")
    return value.to_bytes(8, "big")


def ntoh64(data: bytes) -> int:
    """Decode 8 bytes in network (big-endian) order to an unsigned integer."""
    if len(data) != 8:
        raise ValueError(f"expected 8 bytes, got {len(data)}")
    return int.from_bytes(data, "big")


def _check_flowinfo(flowinfo: int) -> None:
    if not 0 <= flowinfo <= _U32_MAX:
        raise ValueError(f"flowinfo {flowinfo} does not fit in 32 unsigned bits")


def flowinfo_label(flowinfo: int) -> int:
    """Return the 20-bit flow label held in an IPv6 flowinfo word."""
    _check_flowinfo(flowinfo)
    return flowinfo & IPV6_FLOWINFO_FLOWLABEL


def flowinfo_priority(flowinfo: int) -> int:
    """Return the 8 priority (traffic class) bits of an IPv6 flowinfo word."""
    _check_flowinfo(flowinfo)
    return (flowinfo & IPV6_FLOWINFO_PRIORITY) >> _PRIORITY_SHIFT
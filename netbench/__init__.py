"""Building blocks for network throughput measurement: units, timers, settings, sockets, I/O, byte order and TCP statistics."""

__version__ = "0.1.0"

__all__ = ["units", "timer", "settings", "sockets", "netio", "byteorder", "tcpinfo"]
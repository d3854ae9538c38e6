"""Creating, connecting, binding and closing the sockets used by a test."""

from __future__ import annotations

import errno
import logging
import os
import select
import socket
import sys
from typing import Collection, Optional, Union

logger = logging.getLogger(__name__)

NET_SOFTERROR = -1
NET_HARDERROR = -2
NET_HANGUP = -3

CTRL_WAIT_MS = 5000

IFNAMSIZ = 16
_LISTEN_BACKLOG = 2**31 - 1
_WSAEWOULDBLOCK = 10035
_WOULD_BLOCK_ERRNOS = frozenset(
    {errno.EINPROGRESS, errno.EAGAIN, errno.EWOULDBLOCK, _WSAEWOULDBLOCK}
)

Address = tuple


class NetError(OSError):
    """A failure while moving data over a socket."""

    code = NET_HARDERROR


class NetSoftError(NetError):
    """A transient failure; the operation may be retried."""

    code = NET_SOFTERROR


class NetHardError(NetError):
    """A failure that leaves the socket unusable."""

    code = NET_HARDERROR


class NetHangup(NetError):
    """The peer closed the connection."""

    code = NET_HANGUP


def would_block(error: Union[BaseException, int]) -> bool:
    """Tell whether an error (or errno value) means "try again later"."""
    if isinstance(error, int):
        return error in _WOULD_BLOCK_ERRNOS
    if getattr(error, "winerror", None) == _WSAEWOULDBLOCK:
        return True
    return getattr(error, "errno", None) in _WOULD_BLOCK_ERRNOS


def format_fdset(max_fd: int, read_set: Collection[int], write_set: Collection[int]) -> str:
    """Describe which descriptors up to ``max_fd`` are in the read and write sets."""
    parts = []
    for fd in range(max_fd + 1):
        readable = fd in read_set
        writable = fd in write_set
        if readable and writable:
            parts.append(f"{fd} RW ")
        elif readable:
            parts.append(f"{fd} RO ")
        elif writable:
            parts.append(f"{fd} WO ")
    return "".join(parts)


def _raise_errno(code: int) -> None:
    raise OSError(code, os.strerror(code))


def timeout_connect(sock: socket.socket, address: Address, timeout: int) -> None:
    """Connect ``sock`` to ``address``, waiting at most ``timeout`` ms.

    A negative timeout waits forever. Raises :class:`TimeoutError` when the
    wait runs out and :class:`OSError` when the connection fails.
    """
    result = sock.connect_ex(address)
    if result == 0:
        return
    if not would_block(result):
        _raise_errno(result)
    wait = None if timeout < 0 else timeout / 1000.0
    _, writable, _ = select.select([], [sock], [], wait)
    if not writable:
        _raise_errno(errno.ETIMEDOUT)
    pending = sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
    if pending:
        _raise_errno(pending)


def _bind_to_device(sock: socket.socket, bind_dev: str) -> None:
    option = getattr(socket, "SO_BINDTODEVICE", None)
    if option is None:
        _raise_errno(errno.ENOPROTOOPT)
    name = bind_dev.encode()[:IFNAMSIZ].ljust(IFNAMSIZ, b"\0")
    sock.setsockopt(socket.SOL_SOCKET, option, name)


def _with_port(address: Address, port: int) -> Address:
    return (address[0], port) + tuple(address[2:])


def create_socket(
    domain: int,
    type: int,
    proto: int,
    local: Optional[str],
    bind_dev: Optional[str],
    local_port: int,
    server: str,
    port: int,
) -> tuple[socket.socket, Address]:
    """Create a socket suited to reach ``server``:``port`` and bind it locally.

    Returns the socket, unconnected, and the server address to connect to.
    """
    local_address: Optional[Address] = None
    if local:
        local_info = socket.getaddrinfo(local, None, domain, type)
        local_address = local_info[0][4]

    server_info = socket.getaddrinfo(server, str(port), domain, type)
    family, _, _, _, server_address = server_info[0]

    sock = socket.socket(family, type, proto)
    try:
        if bind_dev:
            _bind_to_device(sock, bind_dev)
        if local_address is not None:
            if local_port:
                local_address = _with_port(local_address, local_port)
            sock.bind(local_address)
        elif local_port:
            if family == socket.AF_INET:
                sock.bind(("0.0.0.0", local_port))
            elif family == socket.AF_INET6:
                sock.bind(("::", local_port, 0, 0))
            else:
                _raise_errno(errno.EAFNOSUPPORT)
    except BaseException:
        sock.close()
        raise
    return sock, server_address


def netdial(
    domain: int,
    proto: int,
    local: Optional[str],
    bind_dev: Optional[str],
    local_port: int,
    server: str,
    port: int,
    timeout: int,
) -> socket.socket:
    """Open a socket of type ``proto`` and connect it to ``server``:``port``."""
    logger.debug(
        "netdial, domain: %s proto: %s local: %s bind-dev: %s port: %s",
        domain, proto, local, bind_dev, port,
    )
    sock, server_address = create_socket(
        domain, proto, 0, local, bind_dev, local_port, server, port
    )
    try:
        timeout_connect(sock, server_address, timeout)
    except OSError as error:
        if not would_block(error):
            sock.close()
            raise
    return sock


def netannounce(
    domain: int,
    proto: int,
    local: Optional[str],
    bind_dev: Optional[str],
    port: int,
) -> socket.socket:
    """Open a socket bound to ``local``:``port``; stream sockets also listen.

    With no family and no local address an IPv6 socket that also accepts
    IPv4 connections is made.
    """
    family = socket.AF_INET6 if domain == socket.AF_UNSPEC and not local else domain
    info = socket.getaddrinfo(local, str(port), family, proto, 0, socket.AI_PASSIVE)
    res_family, _, _, _, address = info[0]

    sock = socket.socket(res_family, proto, 0)
    logger.debug(
        "netannounce, domain: %s proto: %s local: %s bind-dev: %s port: %s fd: %s",
        domain, proto, local, bind_dev, port, sock.fileno(),
    )
    try:
        if bind_dev:
            _bind_to_device(sock, bind_dev)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        if (
            hasattr(socket, "IPV6_V6ONLY")
            and not sys.platform.startswith("openbsd")
            and res_family == socket.AF_INET6
            and domain in (socket.AF_UNSPEC, socket.AF_INET6)
        ):
            v6only = 0 if domain == socket.AF_UNSPEC else 1
            sock.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_V6ONLY, v6only)
        sock.bind(address)
        if proto == socket.SOCK_STREAM:
            sock.listen(_LISTEN_BACKLOG)
    except BaseException:
        sock.close()
        raise
    return sock


def close_socket(sock: socket.socket) -> None:
    """Close ``sock``; closing an already closed socket does nothing."""
    fd = sock.fileno()
    logger.debug("Closing socket: %d", fd)
    if fd < 0:
        return
    try:
        sock.close()
    except OSError as error:
        logger.error("Error closing socket %d, error: %s", fd, error)


def set_nonblocking(sock: Union[socket.socket, int], nonblocking: bool) -> None:
    """Switch a socket (or raw descriptor) between blocking and non-blocking."""
    if isinstance(sock, int):
        os.set_blocking(sock, not nonblocking)
    else:
        sock.setblocking(not nonblocking)


def get_sock_domain(sock: socket.socket) -> int:
    """Return the address family of the socket's local address."""
    if sock.fileno() < 0:
        _raise_errno(errno.EBADF)
    sock.getsockname()
    return sock.family
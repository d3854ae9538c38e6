"""Reading and writing whole buffers over sockets with bounded waiting."""

from __future__ import annotations

import errno
import logging
import os
import select
import socket
import time
from typing import Union

from netbench.sockets import NetHangup, NetHardError, NetSoftError, NetError, would_block

logger = logging.getLogger(__name__)

NREAD_READ_TIMEOUT = 10
NREAD_OVERALL_TIMEOUT = 30

FileLike = Union[int, "os.PathLike[str]", object]


def _fileno(obj: object) -> int:
    return obj if isinstance(obj, int) else obj.fileno()  # type: ignore[attr-defined]


def _select(sock: socket.socket, timeout: float, for_write: bool = False) -> bool:
    """Wait up to ``timeout`` seconds for ``sock`` to become ready."""
    try:
        if for_write:
            _, ready, _ = select.select([], [sock], [], max(0.0, timeout))
        else:
            ready, _, _ = select.select([sock], [], [], max(0.0, timeout))
    except (OSError, ValueError) as error:
        code = getattr(error, "errno", None) or errno.EBADF
        raise NetHardError(code, f"select failed: {error}") from error
    return bool(ready)


def _is_transient(error: OSError) -> bool:
    return isinstance(error, InterruptedError) or error.errno == errno.EINTR or would_block(error)


def wait_socket_readable(sock: socket.socket, wait_for_ms: int) -> bool:
    """Tell whether ``sock`` becomes readable within ``wait_for_ms`` milliseconds."""
    return _select(sock, wait_for_ms / 1000.0)


def _recv(sock: socket.socket, count: int, read_timeout: float) -> bytes:
    """Read up to ``count`` bytes, waiting at most ``read_timeout`` s between pieces."""
    if not _select(sock, read_timeout):
        return b""

    received = bytearray()
    deadline = None
    while len(received) < count:
        try:
            data = sock.recv(count - len(received))
        except OSError as error:
            if _is_transient(error):
                break
            logger.error("Error in Nread (%s) fd: %d", error.strerror, sock.fileno())
            raise NetHardError(error.errno or errno.EIO, f"read failed: {error}") from error
        if not data:
            if received:
                break
            raise NetHangup("connection closed by peer")
        received += data
        logger.debug("Nread: %s", bytes(received).hex())

        if len(received) < count:
            now = time.monotonic()
            if deadline is None:
                deadline = now + NREAD_OVERALL_TIMEOUT
            if deadline < now:
                break
            if not _select(sock, read_timeout):
                break
    return bytes(received)


def nread(sock: socket.socket, count: int) -> bytes:
    """Read up to ``count`` bytes from ``sock``.

    Returns ``b""`` when nothing arrives within the read timeout and a
    shorter result when the peer pauses or closes after sending some data.
    Raises :class:`NetHangup` when the peer closed without sending and
    :class:`NetHardError` on other failures.
    """
    return _recv(sock, count, NREAD_READ_TIMEOUT)


def wait_read(sock: socket.socket, count: int, timeout_ms: int) -> bytes:
    """Read ``count`` bytes, giving up after ``timeout_ms`` milliseconds.

    Returns whatever was read by then. An error raised before anything was
    read propagates; after a partial read the partial data is returned.
    """
    deadline = time.monotonic() + timeout_ms / 1000.0
    received = bytearray()
    while True:
        remaining = max(0.0, deadline - time.monotonic())
        try:
            chunk = _recv(sock, count - len(received), remaining)
        except NetError:
            if not received:
                raise
            return bytes(received)
        received += chunk
        if len(received) >= count:
            return bytes(received)
        now = time.monotonic()
        if now >= deadline:
            return bytes(received)
        if not _select(sock, deadline - now):
            return bytes(received)


def nread_no_select(sock: socket.socket, count: int, flags: int = 0) -> bytes:
    """Read up to ``count`` bytes without waiting for readiness first."""
    received = bytearray()
    while len(received) < count:
        try:
            data = sock.recv(count - len(received), flags)
        except OSError as error:
            if _is_transient(error):
                break
            raise NetHardError(error.errno or errno.EIO, f"read failed: {error}") from error
        if not data:
            break
        received += data
    return bytes(received)


def nwrite(sock: socket.socket, data: bytes) -> int:
    """Write ``data`` to ``sock`` and return the number of bytes written.

    Raises :class:`NetSoftError` if nothing could be written for a transient
    reason and :class:`NetHardError` on other failures. A transient failure
    after a partial write returns the partial count.
    """
    view = memoryview(data)
    total = len(view)
    logger.debug("Nwrite: %s", bytes(view).hex())
    sent = 0
    while sent < total:
        try:
            n = sock.send(view[sent:])
        except OSError as error:
            if error.errno == errno.ENOBUFS:
                raise NetSoftError(error.errno, "no buffer space") from error
            if _is_transient(error):
                if sent == 0:
                    raise NetSoftError(error.errno or errno.EAGAIN, "write would block") from error
                return sent
            raise NetHardError(error.errno or errno.EIO, f"write failed: {error}") from error
        if n == 0:
            if sent == 0:
                raise NetSoftError(errno.EAGAIN, "nothing written")
            return sent
        sent += n
    return total


def wait_write(sock: socket.socket, data: bytes, timeout_ms: int) -> int:
    """Write ``data``, giving up after ``timeout_ms`` milliseconds.

    Returns the number of bytes written. An error raised before anything was
    written propagates; after a partial write the partial count is returned.
    """
    view = memoryview(data)
    total = len(view)
    deadline = time.monotonic() + timeout_ms / 1000.0
    sent = 0
    while True:
        try:
            sent += nwrite(sock, view[sent:])
        except NetError:
            if sent == 0:
                raise
            return sent
        if sent == total:
            return sent
        now = time.monotonic()
        if now >= deadline:
            return sent
        if not _select(sock, deadline - now, for_write=True):
            return sent


def has_sendfile() -> bool:
    """Tell whether the platform offers zero-copy file sending."""
    return hasattr(os, "sendfile")


def nsendfile(fromfd: FileLike, sock: socket.socket, count: int) -> int:
    """Send ``count`` bytes from the start of file ``fromfd`` to ``sock``.

    Returns the number of bytes sent; errors are raised as in :func:`nwrite`.
    """
    if not has_sendfile():
        raise NetHardError(errno.ENOSYS, "sendfile is not supported")
    in_fd = _fileno(fromfd)
    out_fd = _fileno(sock)
    left = count
    while left > 0:
        offset = count - left
        try:
            n = os.sendfile(out_fd, in_fd, offset, left)
        except OSError as error:
            if isinstance(error, InterruptedError) or error.errno in (
                errno.EINTR,
                errno.EAGAIN,
                errno.EWOULDBLOCK,
            ):
                if left == count:
                    raise NetSoftError(error.errno, "sendfile would block") from error
                return count - left
            if error.errno in (errno.ENOBUFS, errno.ENOMEM):
                raise NetSoftError(error.errno, "sendfile out of buffers") from error
            raise NetHardError(error.errno or errno.EIO, f"sendfile failed: {error}") from error
        if n == 0:
            raise NetSoftError(errno.EAGAIN, "sendfile sent nothing")
        left -= n
    return count
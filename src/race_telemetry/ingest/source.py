"""Datagram sources — where the ingestion pipeline gets its raw bytes from.

A source is any object with ``read() -> bytes | None`` (``None`` = exhausted)
and ``close()``.  :class:`UdpDatagramSource` reads the game's UDP broadcast;
:class:`IterableSource` replays datagrams already in memory.
"""

from __future__ import annotations

import logging
import socket
import threading
from collections.abc import Callable, Iterable, Iterator
from typing import Protocol

from race_telemetry.protocol import MAX_PACKET_SIZE

_logger = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 20777


class TransportError(Exception):
    """Raised when a datagram source fails; fatal to the ingestion loop."""


class DatagramSource(Protocol):
    def read(self) -> bytes | None: ...

    def close(self) -> None: ...


def _udp_socket() -> socket.socket:
    return socket.socket(socket.AF_INET, socket.SOCK_DGRAM)


class UdpDatagramSource:
    """Receives telemetry datagrams on a bound UDP socket.

    Parameters
    ----------
    host, port:
        Address to bind.  The game broadcasts to port 20777 by default.
    buffer_size:
        Receive buffer size; datagrams longer than this are truncated by the OS
        and will then fail to decode.
    socket_factory:
        Callable returning an unbound datagram socket.  Injected for
        testability; defaults to a real ``AF_INET``/``SOCK_DGRAM`` socket.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        buffer_size: int = MAX_PACKET_SIZE,
        socket_factory: Callable[[], socket.socket] | None = None,
    ) -> None:
        self._address = (host, port)
        self._buffer_size = buffer_size
        self._socket_factory = socket_factory or _udp_socket
        self._sock: socket.socket | None = None
        self._closed = threading.Event()

    @property
    def address(self) -> tuple[str, int]:
        """Bound address (the requested one until :meth:`open` is called)."""
        if self._sock is not None:
            return self._sock.getsockname()[:2]
        return self._address

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def open(self) -> UdpDatagramSource:
        """Create and bind the socket.  Idempotent.

        Raises
        ------
        TransportError
            If the socket cannot be created or bound.
        """
        if self._sock is not None:
            return self
        if self.closed:
            raise TransportError("source already closed")
        try:
            sock = self._socket_factory()
            sock.bind(self._address)
        except OSError as exc:
            raise TransportError(f"cannot bind {self._address[0]}:{self._address[1]}: {exc}") from exc
        self._sock = sock
        _logger.info("listening for telemetry on %s:%d", *self.address)
        return self

    def read(self) -> bytes | None:
        """Block until one datagram arrives and return it.

        Returns ``None`` once the source has been closed, including when
        :meth:`close` is called from another thread during a blocking read.

        Raises
        ------
        TransportError
            On any socket error while the source is open.
        """
        if self.closed:
            return None
        if self._sock is None:
            self.open()
        sock = self._sock
        if sock is None:
            return None
        try:
            data = sock.recv(self._buffer_size)
        except OSError as exc:
            if self.closed:
                return None
            raise TransportError(f"receive failed: {exc}") from exc
        if not data and self.closed:
            return None
        return data

    def close(self) -> None:
        """Close the socket and wake a reader blocked in :meth:`read`."""
        if self.closed:
            return
        self._closed.set()
        sock, self._sock = self._sock, None
        if sock is None:
            return
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            # Not connected; close() alone still releases the port.
            pass
        sock.close()
        _logger.info("telemetry socket closed")

    def __enter__(self) -> UdpDatagramSource:
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()


class IterableSource:
    """Serves datagrams from an in-memory iterable, e.g. a recorded capture."""

    def __init__(self, datagrams: Iterable[bytes]) -> None:
        self._it: Iterator[bytes] | None = iter(datagrams)

    def read(self) -> bytes | None:
        if self._it is None:
            return None
        return next(self._it, None)

    def close(self) -> None:
        self._it = None

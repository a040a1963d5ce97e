"""Datagram transports to the wpa_supplicant control interface.

Each transport is one connected datagram socket. On Unix the client must
bind its own socket file before the daemon can reply, so UnixTransport
draws that file from a small per-process pool of names:

    <local_dir>/wpa_ctrl_<pid>-0 ... wpa_ctrl_<pid>-<N-1>

The command path and the event path each own a separate transport.
"""

import errno
import logging
import os
import socket
import threading
import time
from abc import ABC, abstractmethod

from .errors import (
    PoolExhaustedError,
    ShortWriteError,
    SocketNotFoundError,
    TransportClosedError,
    TransportError,
)
from .protocol import (
    DEFAULT_LOCAL_DIR,
    DEFAULT_UDP_ADDRESS,
    LOCAL_ENDPOINT_POOL_SIZE,
    MAX_RECV,
    POLL_INTERVAL,
    SOCKET_SEARCH_DIRS,
    UDP_SCHEME,
    local_endpoint_name,
)

logger = logging.getLogger(__name__)

# Serializes pool lookups so two threads never bind the same index.
_allocation_lock = threading.Lock()


class Transport(ABC):
    """A bidirectional frame channel to the daemon."""

    @abstractmethod
    def send(self, data: bytes) -> None:
        """Send one frame.

        Raises:
            ShortWriteError: If the socket accepted fewer bytes than given.
            TransportError: If the write fails.
        """

    @abstractmethod
    def receive(self, timeout: float | None = None) -> bytes:
        """Block until one frame arrives and return it.

        Raises:
            TransportClosedError: If the transport is or becomes closed.
            TransportError: On socket errors or when ``timeout`` elapses.
        """

    @abstractmethod
    def close(self) -> None:
        """Release the socket and any local resources. Safe to call twice."""

    @property
    @abstractmethod
    def closed(self) -> bool:
        """True once close() has been called."""

    def execute(self, data: bytes) -> bytes:
        """Send ``data`` and return the next frame. No retries."""
        try:
            self.send(data)
        except TransportError as exc:
            raise type(exc)(f"send failed: {exc}") from exc

        try:
            return self.receive()
        except TransportError as exc:
            raise type(exc)(f"read failed: {exc}") from exc


class _DatagramTransport(Transport):
    """Shared socket handling for the Unix and UDP transports.

    The socket runs with a short timeout so a blocked receive() notices
    close() from another thread within POLL_INTERVAL.
    """

    def __init__(self, sock: socket.socket, local_path: str | None = None) -> None:
        self._sock = sock
        self._local_path = local_path
        self._closed = False
        self._close_lock = threading.Lock()
        self._sock.settimeout(POLL_INTERVAL)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def local_path(self) -> str | None:
        """Filesystem path of the bound local endpoint, if any."""
        return self._local_path

    def send(self, data: bytes) -> None:
        if self._closed:
            raise TransportClosedError("write to closed socket")

        try:
            n = self._sock.send(data)
        except OSError as exc:
            raise TransportError(f"write to socket failed: {exc}") from exc

        if n != len(data):
            raise ShortWriteError(f"short write: {n} of {len(data)} bytes")

    def receive(self, timeout: float | None = None) -> bytes:
        deadline = None if timeout is None else time.monotonic() + timeout

        while True:
            if self._closed:
                raise TransportClosedError("read from closed socket")

            try:
                data = self._sock.recv(MAX_RECV)
            except socket.timeout:
                if deadline is not None and time.monotonic() >= deadline:
                    raise TransportError("read from socket timed out") from None
                continue
            except OSError as exc:
                if self._closed:
                    raise TransportClosedError("read from closed socket") from exc
                raise TransportError(f"read from socket failed: {exc}") from exc

            # shutdown() makes recv() return b"" forever
            if not data and self._closed:
                raise TransportClosedError("read from closed socket")

            return data

    def close(self) -> None:
        with self._close_lock:
            if self._closed:
                return
            self._closed = True

        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass  # not connected any more

        try:
            self._sock.close()
        except OSError as exc:
            raise TransportError(f"close socket failed: {exc}") from exc
        finally:
            if self._local_path is not None:
                _remove_endpoint(self._local_path)
                logger.debug("Released local endpoint %s", self._local_path)


class UnixTransport(_DatagramTransport):
    """AF_UNIX datagram transport bound to a pooled local socket file."""

    @classmethod
    def connect(cls, address: str, local_dir: str | None = None) -> "UnixTransport":
        """Connect to the daemon socket named by ``address``.

        ``address`` may be a full path or an interface name looked up in
        the conventional control directories.

        Raises:
            SocketNotFoundError: If no candidate path exists.
            PoolExhaustedError: If every local endpoint slot is taken.
            TransportError: If the connect itself fails.
        """
        remote = find_socket(address)
        local_dir = local_dir or DEFAULT_LOCAL_DIR

        sock = socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM)
        try:
            with _allocation_lock:
                local_path = _bind_local_endpoint(sock, local_dir)
        except TransportError:
            sock.close()
            raise

        try:
            sock.connect(remote)
        except OSError as exc:
            sock.close()
            _remove_endpoint(local_path)
            raise TransportError(f"dial failed: {exc}") from exc

        logger.debug("Connected %s -> %s", local_path, remote)
        return cls(sock, local_path)


class UDPTransport(_DatagramTransport):
    """UDP transport for daemons built with the UDP control interface."""

    @classmethod
    def connect(cls, address: str = DEFAULT_UDP_ADDRESS) -> "UDPTransport":
        """Connect to ``host:port``.

        Raises:
            TransportError: If the address is malformed or connect fails.
        """
        host, _, port_text = (address or DEFAULT_UDP_ADDRESS).rpartition(":")
        try:
            port = int(port_text)
        except ValueError as exc:
            raise TransportError(f"could not resolve udp address {address!r}") from exc

        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            sock.connect((host or "127.0.0.1", port))
        except OSError as exc:
            sock.close()
            raise TransportError(f"dial failed: {exc}") from exc

        logger.debug("Connected udp %s:%d", host, port)
        return cls(sock)


def connect(address: str, *, local_dir: str | None = None) -> Transport:
    """Open a transport to the daemon.

    ``udp://host:port`` addresses (and every address on platforms without
    Unix sockets) use UDP; anything else is a Unix socket path or name.
    """
    if address.startswith(UDP_SCHEME) or not hasattr(socket, "AF_UNIX"):
        return UDPTransport.connect(address.removeprefix(UDP_SCHEME))
    return UnixTransport.connect(address, local_dir=local_dir)


def find_socket(address: str) -> str:
    """Return the first existing control socket path for ``address``.

    Raises:
        SocketNotFoundError: If none of the candidates exists.
    """
    candidates = [address] + [os.path.join(d, address) for d in SOCKET_SEARCH_DIRS]
    for path in candidates:
        if os.path.exists(path):
            return path
    raise SocketNotFoundError(f"socket not found: {address}")


def local_endpoint_path(local_dir: str, index: int, pid: int | None = None) -> str:
    """Return the path of pool slot ``index`` for ``pid`` (default: this process)."""
    return os.path.join(local_dir, local_endpoint_name(pid or os.getpid(), index))


def _bind_local_endpoint(sock: socket.socket, local_dir: str) -> str:
    """Bind ``sock`` to the lowest free pool slot and return its path.

    Caller must hold _allocation_lock.
    """
    path = ""
    for index in range(LOCAL_ENDPOINT_POOL_SIZE):
        path = local_endpoint_path(local_dir, index)
        if os.path.exists(path):
            continue

        try:
            sock.bind(path)
        except OSError as exc:
            if exc.errno == errno.EADDRINUSE:
                continue
            raise TransportError(f"bind {path} failed: {exc}") from exc

        logger.debug("Allocated local endpoint %s", path)
        return path

    raise PoolExhaustedError(f"reached max socket file limit: {path}")


def _remove_endpoint(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass

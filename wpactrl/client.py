"""Client for the wpa_supplicant control interface.

A client holds two transports to the same daemon socket:

- the command transport, used by execute() one request at a time, and
- the event transport, opened lazily by notify(). It sends ATTACH and
  then belongs to a background thread that reads event frames.

Usage::

    with WPAClient("wlan0") as client:
        client.execute("PING")
        sub = client.notify(commands.EVENT_CONNECTED)
        event = sub.get(timeout=10)
"""

import logging
import queue
import threading
from collections.abc import Callable

from . import commands
from .errors import (
    CloseError,
    ScanTimeoutError,
    TransportClosedError,
    TransportError,
    WPAError,
)
from .networks import AccessPoint, Network, parse_networks, parse_scan_results
from .protocol import (
    CMD_ATTACH,
    CMD_DETACH,
    DETACH_ACK,
    EVENT_BUFFER_SIZE,
    SCAN_TIMEOUT,
    THREAD_JOIN_TIMEOUT,
    Event,
    check,
    format_command,
    parse_event,
)
from .subscriptions import (
    Channel,
    ChannelClosed,
    Dispatcher,
    Subscription,
    SubscriptionRegistry,
)
from .transport import Transport, connect

logger = logging.getLogger(__name__)


class WPAClient:
    """Synchronous client for one wpa_supplicant control socket.

    Args:
        address: Socket path, interface name, or ``udp://host:port``.
        local_dir: Directory for this process's local socket files.
        registry: Subscription registry; a private one is created if omitted.
        connector: Callable opening a Transport, mainly for tests.

    Raises:
        TransportError: If the command transport cannot be opened.
    """

    def __init__(
        self,
        address: str,
        *,
        local_dir: str | None = None,
        registry: SubscriptionRegistry | None = None,
        connector: Callable[..., Transport] = connect,
    ) -> None:
        self.address = address
        self._local_dir = local_dir
        self._connect = connector

        self._cmd_transport: Transport = connector(address, local_dir=local_dir)
        self._event_transport: Transport | None = None

        # One command in flight: replies are matched by order only.
        self._cmd_lock = threading.Lock()

        # Guards _attached and the event transport; never taken while
        # holding the registry lock.
        self._attach_lock = threading.Lock()
        self._attached = False
        self._events: Channel = Channel(EVENT_BUFFER_SIZE)
        self._reader: threading.Thread | None = None
        self._dispatcher: Dispatcher | None = None

        self._registry = registry if registry is not None else SubscriptionRegistry()

    def __enter__(self) -> "WPAClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @property
    def attached(self) -> bool:
        """True while the event transport is attached."""
        with self._attach_lock:
            return self._attached

    # --- Commands ---

    def execute(self, command: str, *args: str) -> bytes:
        """Send a command and return the daemon's raw reply.

        Raises:
            TransportError: If the round trip fails.
            UnknownCommandError: If the daemon replied UNKNOWN COMMAND.
            CommandFailedError: If the daemon replied FAIL (or PING got no PONG).
            InvalidCommandError: If the daemon rejected the arguments.
        """
        with self._cmd_lock:
            raw = self._cmd_transport.execute(format_command(command, *args))

        return check(command, raw)

    def ping(self) -> bool:
        """Return True if the daemon answers PING with PONG."""
        try:
            self.execute(commands.PING)
        except WPAError:
            return False
        return True

    def list_networks(self) -> list[Network]:
        """Execute LIST_NETWORKS and decode the reply."""
        return parse_networks(self.execute(commands.LIST_NETWORKS))

    def scan_results(self) -> list[AccessPoint]:
        """Execute SCAN_RESULTS and decode the reply."""
        return parse_scan_results(self.execute(commands.SCAN_RESULTS))

    def scan(self, timeout: float = SCAN_TIMEOUT) -> list[AccessPoint]:
        """Return scanned access points, triggering a scan if none are cached.

        Raises:
            ScanTimeoutError: If no access point event arrives within ``timeout``.
        """
        subscription = self.notify(commands.WPS_EVENT_AP_AVAILABLE)
        try:
            access_points = self.scan_results()
            if access_points:
                return access_points

            self.execute(commands.SCAN)
            try:
                subscription.get(timeout=timeout)
            except queue.Empty as exc:
                raise ScanTimeoutError("scan timed out") from exc
            except ChannelClosed:
                pass  # stream ended; re-query anyway

            return self.scan_results()
        finally:
            self.stop(subscription)

    # --- Events ---

    def notify(self, *events: str) -> Subscription:
        """Subscribe to ``events``, or to every event if none are given.

        Attaches the event transport on first use. If attaching fails the
        subscription is removed again and the error is raised.
        """
        subscription = self._registry.register(events)

        try:
            self._attach()
        except WPAError:
            self._registry.unregister(subscription)
            raise

        return subscription

    def stop(self, subscription: Subscription) -> None:
        """Stop relaying events to ``subscription`` and close it."""
        self._registry.unregister(subscription)

    def _attach(self) -> bool:
        """Attach the event transport and start the reader and dispatcher.

        Returns True if this call attached, False if already attached.
        """
        with self._attach_lock:
            if self._attached:
                return False

            if self._event_transport is None:
                self._event_transport = self._connect(
                    self.address, local_dir=self._local_dir
                )

            # The previous reader must be gone before ATTACH, or it could
            # swallow the reply.
            if self._reader is not None:
                self._reader.join(THREAD_JOIN_TIMEOUT)
                if self._reader.is_alive():
                    logger.warning("Previous event reader still running")

            raw = self._event_transport.execute(CMD_ATTACH.encode())
            check(CMD_ATTACH, raw)

            self._events = Channel(EVENT_BUFFER_SIZE)
            self._reader = threading.Thread(
                target=self._receive_loop,
                args=(self._event_transport, self._events),
                name="wpactrl-events",
                daemon=True,
            )
            self._reader.start()
            self._dispatcher = Dispatcher(self._events, self._registry)
            self._dispatcher.start()
            self._attached = True
            logger.debug("Attached to %s", self.address)
            return True

    def _detach(self) -> None:
        """Detach the event transport; a no-op when not attached.

        On return every subscriber channel has been closed.
        """
        with self._attach_lock:
            if not self._attached:
                return

            self._attached = False
            self._events.close()
            try:
                # The daemon's OK arrives on the event socket and ends the reader.
                self._event_transport.send(CMD_DETACH.encode())
            finally:
                # The dispatcher drains what is queued, then closes subscribers.
                if self._dispatcher is not None:
                    self._dispatcher.join(THREAD_JOIN_TIMEOUT)
            logger.debug("Detached from %s", self.address)

    def _receive_loop(self, transport: Transport, events: Channel) -> None:
        while True:
            try:
                frame = transport.receive()
            except TransportClosedError:
                break
            except TransportError as exc:
                logger.warning("Event reader stopped: %s", exc)
                events.offer(Event(error=exc))
                self._reader_failed(events)
                break

            if frame == DETACH_ACK:
                break

            if not events.offer(parse_event(frame)):
                logger.debug("Event buffer full, dropped %r", frame)

        logger.debug("Event reader exited")

    def _reader_failed(self, events: Channel) -> None:
        """Mark the client detached after its reader died on a transport error.

        Closing ``events`` lets the dispatcher close every subscriber, and
        the next notify() attaches again. A reader from an earlier attach
        leaves the current one alone.
        """
        with self._attach_lock:
            if events is not self._events or not self._attached:
                return
            self._attached = False
            events.close()
        logger.debug("Detached from %s after reader failure", self.address)

    # --- Teardown ---

    def close(self) -> None:
        """Close both transports, detaching first if needed.

        Every step runs even if an earlier one fails.

        Raises:
            CloseError: Listing each failed step.
        """
        errors: list[Exception] = []

        # Not under _cmd_lock: closing wakes a command blocked in receive.
        try:
            self._cmd_transport.close()
        except WPAError as exc:
            errors.append(exc)

        if self._event_transport is not None:
            try:
                self._detach()
            except WPAError as exc:
                errors.append(exc)

            try:
                self._event_transport.close()
            except WPAError as exc:
                errors.append(exc)

        for thread in (self._reader, self._dispatcher):
            if thread is not None and thread is not threading.current_thread():
                thread.join(THREAD_JOIN_TIMEOUT)

        if errors:
            raise CloseError(errors) from errors[0]

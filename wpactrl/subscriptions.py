"""Event subscriptions and non-blocking fan-out.

Events travel through two bounded stages:

    receive loop --offer--> raw Channel (10) --Dispatcher--> subscriber Channels (5)

Every hand-off is enqueue-or-drop, so neither the receive loop nor the
dispatcher ever waits on a slow consumer, and a full subscriber only
loses its own events.
"""

import itertools
import logging
import queue
import threading
from collections import deque
from collections.abc import Iterable, Iterator
from typing import Any

from .protocol import SUBSCRIBER_BUFFER_SIZE, Event

logger = logging.getLogger(__name__)


class ChannelClosed(Exception):
    """Raised by Channel.get() once the channel is closed and drained."""


class Channel:
    """Bounded FIFO that can be closed, in the spirit of a Go channel.

    Writers never block: offer() reports whether the item was taken.
    Readers block in get() until an item arrives or the channel closes.
    Items queued before close() are still handed out.
    """

    def __init__(self, capacity: int) -> None:
        self._capacity = capacity
        self._items: deque[Any] = deque()
        self._cond = threading.Condition()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    def offer(self, item: Any) -> bool:
        """Enqueue ``item`` unless the channel is full or closed."""
        with self._cond:
            if self._closed or len(self._items) >= self._capacity:
                return False
            self._items.append(item)
            self._cond.notify()
            return True

    def get(self, timeout: float | None = None) -> Any:
        """Return the next item.

        Raises:
            queue.Empty: If ``timeout`` elapses first.
            ChannelClosed: If the channel is closed and empty.
        """
        with self._cond:
            self._cond.wait_for(lambda: self._items or self._closed, timeout=timeout)
            if self._items:
                return self._items.popleft()
            if self._closed:
                raise ChannelClosed()
            raise queue.Empty()

    def get_nowait(self) -> Any:
        with self._cond:
            if self._items:
                return self._items.popleft()
            if self._closed:
                raise ChannelClosed()
            raise queue.Empty()

    def close(self) -> bool:
        """Close the channel. Returns True only for the first call."""
        with self._cond:
            if self._closed:
                return False
            self._closed = True
            self._cond.notify_all()
            return True

    def __iter__(self) -> Iterator[Any]:
        while True:
            try:
                yield self.get()
            except ChannelClosed:
                return


class Subscription:
    """Receive-only view of one subscriber's event stream.

    Iterating yields events until the subscription is stopped or the
    client detaches.
    """

    def __init__(self, handle: int, events: frozenset[str], channel: Channel) -> None:
        self.handle = handle
        self.events = events
        self._channel = channel

    def __repr__(self) -> str:
        names = sorted(self.events) or "*"
        return f"<Subscription {self.handle} {names}>"

    @property
    def closed(self) -> bool:
        return self._channel.closed

    def __len__(self) -> int:
        return len(self._channel)

    def get(self, timeout: float | None = None) -> Event:
        """Wait for the next event; see Channel.get()."""
        return self._channel.get(timeout)

    def get_nowait(self) -> Event:
        return self._channel.get_nowait()

    def drain(self) -> list[Event]:
        """Return every queued event without blocking."""
        events = []
        while True:
            try:
                events.append(self._channel.get_nowait())
            except (queue.Empty, ChannelClosed):
                return events

    def __iter__(self) -> Iterator[Event]:
        return iter(self._channel)

    def wants(self, event: Event) -> bool:
        """True if ``event`` passes this subscriber's filter.

        Error events pass every filter; an empty filter passes everything.
        """
        return not self.events or event.error is not None or event.message in self.events


class _ReadWriteLock:
    """Reader-writer lock: concurrent dispatch, exclusive register/unregister."""

    class _ReadContext:
        def __init__(self, parent: "_ReadWriteLock") -> None:
            self._parent = parent

        def __enter__(self) -> None:
            with self._parent._cond:
                while self._parent._writer:
                    self._parent._cond.wait()
                self._parent._readers += 1

        def __exit__(self, exc_type, exc_val, exc_tb) -> None:
            with self._parent._cond:
                self._parent._readers -= 1
                if self._parent._readers == 0:
                    self._parent._cond.notify_all()

    class _WriteContext:
        def __init__(self, parent: "_ReadWriteLock") -> None:
            self._parent = parent

        def __enter__(self) -> None:
            self._parent._cond.acquire()
            while self._parent._writer or self._parent._readers > 0:
                self._parent._cond.wait()
            self._parent._writer = True

        def __exit__(self, exc_type, exc_val, exc_tb) -> None:
            self._parent._writer = False
            self._parent._cond.notify_all()
            self._parent._cond.release()

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False

    def read(self) -> "_ReadWriteLock._ReadContext":
        return self._ReadContext(self)

    def write(self) -> "_ReadWriteLock._WriteContext":
        return self._WriteContext(self)


class SubscriptionRegistry:
    """Tracks subscribers and fans events out to them.

    One registry belongs to one client; it is passed in rather than
    shared process-wide.
    """

    def __init__(self, buffer_size: int = SUBSCRIBER_BUFFER_SIZE) -> None:
        self._buffer_size = buffer_size
        self._subscribers: dict[int, Subscription] = {}
        self._handles = itertools.count(1)
        self._lock = _ReadWriteLock()

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._subscribers)

    def __contains__(self, subscription: object) -> bool:
        if not isinstance(subscription, Subscription):
            return False
        with self._lock.read():
            return self._subscribers.get(subscription.handle) is subscription

    def register(self, events: Iterable[str] = ()) -> Subscription:
        """Add a subscriber for ``events`` (all events when empty)."""
        subscription = Subscription(
            next(self._handles), frozenset(events), Channel(self._buffer_size)
        )
        with self._lock.write():
            self._subscribers[subscription.handle] = subscription
        logger.debug("Registered %r", subscription)
        return subscription

    def unregister(self, subscription: Subscription) -> bool:
        """Close and remove ``subscription``. False if it was not registered."""
        with self._lock.write():
            if self._subscribers.get(subscription.handle) is not subscription:
                return False
            del self._subscribers[subscription.handle]
            subscription._channel.close()
        logger.debug("Unregistered %r", subscription)
        return True

    def dispatch(self, event: Event) -> int:
        """Offer ``event`` to every matching subscriber; return deliveries."""
        delivered = 0
        with self._lock.read():
            for subscription in self._subscribers.values():
                if not subscription.wants(event):
                    continue
                if subscription._channel.offer(event):
                    delivered += 1
                else:
                    logger.debug("Dropped event %r for %r", event.message, subscription)
        return delivered

    def close_all(self) -> None:
        """Close every subscriber channel and forget all subscribers."""
        with self._lock.write():
            for subscription in self._subscribers.values():
                subscription._channel.close()
            self._subscribers.clear()


class Dispatcher(threading.Thread):
    """Drains the raw event channel into a registry until it closes.

    When the raw channel closes every subscriber channel is closed too,
    which tells consumers the stream has ended.
    """

    def __init__(self, source: Channel, registry: SubscriptionRegistry) -> None:
        super().__init__(name="wpactrl-dispatcher", daemon=True)
        self._source = source
        self._registry = registry

    def run(self) -> None:
        for event in self._source:
            self._registry.dispatch(event)
        self._registry.close_all()
        logger.debug("Dispatcher stopped")

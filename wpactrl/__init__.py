"""wpactrl — client for the wpa_supplicant control interface.

Runs commands over the daemon's datagram control socket and relays its
asynchronous events to any number of filtered subscribers:

    Python code <--WPAClient--> command socket  --\\
                                event socket    ---+--> wpa_supplicant
                                (ATTACH/DETACH)    |    /var/run/wpa_supplicant/<iface>
"""

__version__ = "0.1.0"

from .client import WPAClient
from .errors import (
    CloseError,
    CommandFailedError,
    EventParseError,
    InvalidCommandError,
    PoolExhaustedError,
    ScanTimeoutError,
    ShortWriteError,
    SocketNotFoundError,
    TransportClosedError,
    TransportError,
    UnknownCommandError,
    WPAError,
)
from .networks import AccessPoint, Network
from .protocol import AuthRequest, Event
from .subscriptions import ChannelClosed, Subscription, SubscriptionRegistry

__all__ = [
    "AccessPoint",
    "AuthRequest",
    "ChannelClosed",
    "CloseError",
    "CommandFailedError",
    "Event",
    "EventParseError",
    "InvalidCommandError",
    "Network",
    "PoolExhaustedError",
    "ScanTimeoutError",
    "ShortWriteError",
    "SocketNotFoundError",
    "Subscription",
    "SubscriptionRegistry",
    "TransportClosedError",
    "TransportError",
    "UnknownCommandError",
    "WPAClient",
    "WPAError",
    "__version__",
]

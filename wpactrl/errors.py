"""Exception hierarchy for the wpa_supplicant control client.

Transport failures, reply classification failures and teardown failures
each get their own branch so callers can catch exactly what they handle.
"""


class WPAError(Exception):
    """Base class for every error raised by wpactrl."""


# --- Transport ---


class TransportError(WPAError):
    """Raised when connecting, sending or receiving on a socket fails."""


class SocketNotFoundError(TransportError):
    """Raised when the daemon's control socket cannot be located."""


class PoolExhaustedError(TransportError):
    """Raised when every local endpoint slot is already in use."""


class ShortWriteError(TransportError):
    """Raised when the socket accepted fewer bytes than were sent."""


class TransportClosedError(TransportError):
    """Raised when a transport is used after it was closed."""


# --- Reply classification ---


class UnknownCommandError(WPAError):
    """Raised when the daemon replies ``UNKNOWN COMMAND``."""

    def __init__(self, message: str = "unknown command") -> None:
        super().__init__(message)


class CommandFailedError(WPAError):
    """Raised when the daemon replies ``FAIL`` or an unexpected liveness reply."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(f"command failed: {detail}" if detail else "command failed")


class InvalidCommandError(WPAError):
    """Raised when the daemon rejects a command's arguments.

    Attributes:
        command: The command name that was rejected.
        detail: The daemon's explanation, empty when it printed a usage dump.
    """

    def __init__(self, command: str, detail: str = "") -> None:
        self.command = command
        self.detail = detail
        super().__init__(f"{command}: {detail}")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InvalidCommandError):
            return NotImplemented
        return (self.command, self.detail) == (other.command, other.detail)

    def __hash__(self) -> int:
        return hash((self.command, self.detail))


# --- Events and orchestration ---


class EventParseError(WPAError):
    """A malformed event frame. Delivered inside an Event, never raised."""


class ScanTimeoutError(WPAError):
    """Raised when a scan does not report results in time."""


class CloseError(WPAError):
    """Raised by close() when one or more teardown steps failed.

    Every step is attempted; ``errors`` holds each failure in order.
    """

    def __init__(self, errors: list[Exception]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(str(e) for e in self.errors))

"""Protocol constants, reply classification and event parsing for the
wpa_supplicant control interface.

The control interface is datagram based and line oriented:

    Request:   NAME [arg ...]
    Reply:     <text>\\n          (OK, FAIL, UNKNOWN COMMAND, data, usage...)
    Event:     <N>MESSAGE\\n      (only on a socket that sent ATTACH)

Replies carry no request identifier, so a reply belongs to whichever
command was sent last on the same socket.
"""

from dataclasses import dataclass
from typing import Union

from . import commands
from .errors import (
    CommandFailedError,
    EventParseError,
    InvalidCommandError,
    UnknownCommandError,
)

# --- Wire-format literals ---

CMD_ATTACH = "ATTACH"
CMD_DETACH = "DETACH"

# The daemon acknowledges DETACH on the event socket itself, so the
# receive loop sees this frame instead of an event.
DETACH_ACK = b"OK\n"

PONG = "PONG"
FAIL = "FAIL"
UNKNOWN_COMMAND = "UNKNOWN COMMAND"

# Credential request/response markers (wpa_ctrl.h).
CTRL_REQ = "CTRL-REQ-"
CTRL_RSP = "CTRL-RSP-"

# --- Socket locations ---

SOCKET_SEARCH_DIRS = ("/var/wpa_supplicant", "/var/run/wpa_supplicant")

DEFAULT_LOCAL_DIR = "/tmp"
LOCAL_ENDPOINT_PREFIX = "wpa_ctrl_"
LOCAL_ENDPOINT_POOL_SIZE = 3

UDP_SCHEME = "udp://"
DEFAULT_UDP_ADDRESS = "127.0.0.1:9878"

# --- Buffer sizes ---

MAX_RECV = 4096
EVENT_BUFFER_SIZE = 10
SUBSCRIBER_BUFFER_SIZE = 5

# --- Timeouts (seconds) ---

SCAN_TIMEOUT = 2.0
POLL_INTERVAL = 0.2
THREAD_JOIN_TIMEOUT = 2.0


def local_endpoint_name(pid: int, index: int) -> str:
    """Return the file name of local endpoint ``index`` for process ``pid``."""
    return f"{LOCAL_ENDPOINT_PREFIX}{pid}-{index}"


def format_command(command: str, *args: str) -> bytes:
    """Build the wire line for a command: ``NAME arg1 arg2 ...``."""
    if args:
        return f"{command} {' '.join(args)}".encode()
    return command.encode()


# --- Reply classification ---


@dataclass(frozen=True, slots=True)
class Success:
    """The daemon accepted the command; ``payload`` is the raw reply."""

    payload: bytes


@dataclass(frozen=True, slots=True)
class UnknownCommand:
    """The daemon does not know the command."""


@dataclass(frozen=True, slots=True)
class CommandFailed:
    """The daemon replied FAIL, or the liveness check got the wrong text."""

    detail: str = ""


@dataclass(frozen=True, slots=True)
class InvalidCommand:
    """The daemon rejected the arguments.

    ``detail`` is empty when the daemon answered with a usage dump.
    """

    command: str
    detail: str


Outcome = Union[Success, UnknownCommand, CommandFailed, InvalidCommand]


def classify(command: str, raw: bytes) -> Outcome:
    """Classify a raw reply to ``command``.

    Rules are applied in order: literal UNKNOWN COMMAND and FAIL first,
    then the ``Invalid <CMD> command`` prefix, then a usage dump (reply
    starting with the lowercase command name), then the PING liveness
    check. Anything else is a success.
    """
    text = raw.decode("utf-8", errors="replace").removesuffix("\n")

    if text == UNKNOWN_COMMAND:
        return UnknownCommand()
    if text == FAIL:
        return CommandFailed()

    invalid_prefix = f"Invalid {command} command"
    if text.startswith(invalid_prefix):
        detail = text[len(invalid_prefix) :]
        for i, ch in enumerate(detail):
            if "a" <= ch <= "z":
                detail = detail[i:]
                break
        return InvalidCommand(command, detail.replace("\n", " "))

    if text.startswith(command.lower()):
        return InvalidCommand(command, "")

    if command == commands.PING and text != PONG:
        return CommandFailed(f"expected {PONG} got {text}")

    return Success(raw)


def check(command: str, raw: bytes) -> bytes:
    """Classify ``raw`` and return it, raising for any non-success outcome.

    Raises:
        UnknownCommandError, CommandFailedError, InvalidCommandError
    """
    outcome = classify(command, raw)
    match outcome:
        case Success(payload):
            return payload
        case UnknownCommand():
            raise UnknownCommandError()
        case CommandFailed(detail):
            raise CommandFailedError(detail)
        case InvalidCommand(cmd, detail):
            raise InvalidCommandError(cmd, detail)
    raise TypeError(f"unexpected outcome {outcome!r}")


# --- Events ---


@dataclass(frozen=True, slots=True)
class AuthRequest:
    """Credential prompt carried by a ``CTRL-REQ-<kind>-<id>:<text>`` event.

    Attributes:
        network_id: Configured network the request refers to.
        kind: Requested credential, e.g. ``PASSWORD`` or ``OTP``.
        text: Human readable prompt.
    """

    network_id: int
    kind: str
    text: str


@dataclass(frozen=True, slots=True)
class Event:
    """Asynchronous notification pushed by the daemon.

    An event with ``error`` set stands for a malformed frame; its other
    fields carry no meaning.
    """

    severity: int = 0
    message: str = ""
    auth_request: AuthRequest | None = None
    error: Exception | None = None


def parse_event(frame: bytes) -> Event:
    """Parse one ``<N>message\\n`` frame into an Event.

    Never raises: malformed frames come back as an Event carrying only
    an EventParseError.
    """
    if len(frame) < 5:
        msg = frame.decode("utf-8", errors="replace").removesuffix("\n")
        return Event(error=EventParseError(f"message too short: {msg}"))

    level = frame[1:2]
    if not level.isdigit():
        return Event(
            error=EventParseError(f"parse severity: invalid digit {level!r}")
        )
    severity = int(level)

    message = frame[3:].decode("utf-8", errors="replace").removesuffix("\n")
    if not message.startswith(CTRL_REQ):
        return Event(severity=severity, message=message)

    body = message[len(CTRL_REQ) :]
    kind, dash, rest = body.partition("-")
    id_text, colon, text = rest.partition(":")
    if not dash or not colon:
        return Event(
            error=EventParseError(f"parse networkID: malformed request {body!r}")
        )

    try:
        network_id = int(id_text)
    except ValueError as exc:
        return Event(error=EventParseError(f"parse networkID: {exc}"))

    return Event(
        severity=severity,
        message=CTRL_REQ,
        auth_request=AuthRequest(network_id=network_id, kind=kind, text=text),
    )

"""Shared fixtures for the wpactrl test suite.

FakeSupplicant binds a real AF_UNIX datagram socket and answers a subset
of the wpa_supplicant control protocol, so clients are tested against
actual sockets rather than mocks.
"""

import os
import shutil
import socket
import tempfile
import threading
import time

import pytest

from wpactrl import commands
from wpactrl.client import WPAClient
from wpactrl.errors import WPAError

NETWORK_HEADER = "network id / ssid / bssid / flags"
SCAN_HEADER = "bssid / frequency / signal level / flags / ssid"

SCAN_ROWS = (
    "d0:7a:b5:31:23:a0\t2472\t-30\t[WPA2-PSK-CCMP][WPS][ESS]\tAP0\n"
    "00:1f:1f:37:42:d9\t2442\t-37\t[WPA2-PSK-CCMP][ESS]\tAP1\n"
    "24:00:ba:f8:65:df\t2412\t-77\t[WPA-PSK-CCMP+TKIP][WPA2-PSK-CCMP+TKIP][WPS][ESS]\tAP2"
)

SET_NETWORK_USAGE = """set_network variables:
\tssid (network name, SSID)
\tpsk (WPA passphrase or pre-shared key)
\tkey_mgmt (key management protocol)

Please see wpa_supplicant.conf documentation for full list of
available variables."""

SET_NETWORK_FAIL = """Invalid SET_NETWORK command: needs three arguments
(network id, variable name, and value)"""

REMOVE_NETWORK_FAIL = "Invalid REMOVE_NETWORK command - at least 1 argument is required."

# Sent in reply to the test-only EVENTS command.
BURST_EVENTS = [
    commands.EVENT_AVOID_FREQ,
    commands.EVENT_BEACON_LOSS,
    commands.EVENT_BSS_ADDED,
    commands.EVENT_BSS_ADDED,
    commands.EVENT_CHANNEL_SWITCH,
    commands.EVENT_CONNECTED,
    commands.EVENT_DISCONNECTED,
    commands.EVENT_EAP_FAILURE,
    commands.EVENT_EAP_NOTIFICATION,
    commands.EVENT_NETWORK_NOT_FOUND,
    commands.EVENT_PASSWORD_CHANGED,
]


class FakeSupplicant:
    """In-process stand-in for the wpa_supplicant control socket."""

    def __init__(self, path: str) -> None:
        self.path = path
        self.replies: dict[str, str] = {commands.PING: "PONG"}
        self.subscribers: dict[str, None] = {}
        self.networks: list[dict] = []
        self.scanned = False
        self.received: list[str] = []

        self._sock = socket.socket(socket.AF_UNIX, socket.SOCK_DGRAM)
        self._sock.bind(path)
        self._sock.settimeout(0.05)
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def start(self) -> None:
        self._thread.start()

    def close(self) -> None:
        self._stop.set()
        self._thread.join(2.0)
        self._sock.close()
        if os.path.exists(self.path):
            os.remove(self.path)

    def count(self, command: str) -> int:
        """Number of times ``command`` was received."""
        return sum(1 for line in self.received if line.split(" ")[0] == command)

    def emit(self, severity: int, *messages: str) -> None:
        """Send ``<severity>message`` frames to every attached client."""
        for message in messages:
            self.emit_raw(f"<{severity}>{message}\n".encode())
            time.sleep(0.005)

    def emit_raw(self, frame: bytes) -> None:
        for addr in list(self.subscribers):
            self._send(frame, addr)

    # --- Internal ---

    def _serve(self) -> None:
        while not self._stop.is_set():
            try:
                data, addr = self._sock.recvfrom(4096)
            except socket.timeout:
                continue
            except OSError:
                return
            self._handle(data.decode(), addr)

    def _write(self, text: str, addr: str) -> None:
        self._send(f"{text}\n".encode(), addr)

    def _send(self, frame: bytes, addr: str) -> None:
        try:
            self._sock.sendto(frame, addr)
        except OSError:
            pass  # client already gone

    def _handle(self, line: str, addr: str) -> None:
        self.received.append(line)
        parts = line.split(" ")
        cmd, args = parts[0], [a for a in parts[1:] if a]

        if cmd in self.replies:
            self._write(self.replies[cmd], addr)
            return

        match cmd:
            case "ATTACH":
                self.subscribers[addr] = None
                self._write("OK", addr)
            case "DETACH":
                if addr in self.subscribers:
                    del self.subscribers[addr]
                    self._write("OK", addr)
            case "EVENTS":
                self._write("OK", addr)
                self.emit(2, *BURST_EVENTS)
            case commands.SCAN_RESULTS:
                if self.scanned:
                    self._write(f"{SCAN_HEADER}\n{SCAN_ROWS}", addr)
                else:
                    self._write(SCAN_HEADER, addr)
            case commands.SCAN:
                self._write("OK", addr)
                self.emit(
                    3,
                    commands.EVENT_SCAN_STARTED,
                    commands.EVENT_SCAN_RESULTS,
                    commands.WPS_EVENT_AP_AVAILABLE,
                )
                self.scanned = True
            case commands.ADD_NETWORK:
                self.networks.append({"ssid": "", "bssid": "any", "flags": "[DISABLED]"})
                self._write(str(len(self.networks) - 1), addr)
            case commands.REMOVE_NETWORK:
                self._remove_network(args, addr)
            case commands.SET_NETWORK:
                self._set_network(args, addr)
            case commands.LIST_NETWORKS:
                rows = "".join(
                    f"\n{i}\t{n['ssid']}\t{n['bssid']}\t{n['flags']}"
                    for i, n in enumerate(self.networks)
                )
                self._write(NETWORK_HEADER + rows, addr)
            case _:
                self._write("UNKNOWN COMMAND", addr)

    def _remove_network(self, args: list[str], addr: str) -> None:
        if not args:
            self._write(REMOVE_NETWORK_FAIL, addr)
            return
        try:
            network_id = int(args[0])
        except ValueError:
            self._write("FAIL", addr)
            return
        if not 0 <= network_id < len(self.networks):
            self._write("FAIL", addr)
            return
        del self.networks[network_id:]
        self._write("OK", addr)

    def _set_network(self, args: list[str], addr: str) -> None:
        if not args:
            self._write(SET_NETWORK_USAGE, addr)
            return
        if len(args) != 3 or args[1] != "ssid":
            self._write(SET_NETWORK_FAIL, addr)
            return
        try:
            network_id = int(args[0])
        except ValueError:
            self._write(SET_NETWORK_FAIL, addr)
            return
        if not 0 <= network_id < len(self.networks):
            self._write("FAIL", addr)
            return
        self.networks[network_id]["ssid"] = args[2].strip('"')
        self._write("OK", addr)


def wait_for(predicate, timeout: float = 2.0) -> bool:
    """Poll ``predicate`` until it is true or ``timeout`` elapses."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def socket_dir():
    """Short-lived directory for the daemon socket (Unix paths are length-limited)."""
    path = tempfile.mkdtemp(prefix="wpa")
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def local_dir():
    """Private directory for the client's pooled local socket files."""
    path = tempfile.mkdtemp(prefix="wpc")
    yield path
    shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def daemon(socket_dir):
    fake = FakeSupplicant(os.path.join(socket_dir, "wlan0"))
    fake.start()
    yield fake
    fake.close()


@pytest.fixture
def client(daemon, local_dir):
    """A WPAClient connected to the fake daemon; closed after the test."""
    c = WPAClient(daemon.path, local_dir=local_dir)
    yield c
    try:
        c.close()
    except WPAError:
        pass

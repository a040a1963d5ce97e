"""Decoders for the tab-separated LIST_NETWORKS and SCAN_RESULTS replies.

Both replies start with a header line that is skipped:

    network id / ssid / bssid / flags
    0\thome\tany\t[CURRENT]

    bssid / frequency / signal level / flags / ssid
    d0:7a:b5:31:23:a0\t2472\t-30\t[WPA2-PSK-CCMP][ESS]\tAP0
"""

import csv
import io
import re
from dataclasses import dataclass, field

_MAC_RE = re.compile(r"^[0-9a-fA-F]{2}([:-])[0-9a-fA-F]{2}(\1[0-9a-fA-F]{2}){4}$")


@dataclass(frozen=True, slots=True)
class Network:
    """A configured network from LIST_NETWORKS."""

    id: int
    ssid: str
    bssid: str
    flags: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class AccessPoint:
    """A scanned access point from SCAN_RESULTS."""

    bssid: str
    ssid: str
    frequency: int
    signal_strength: int
    flags: list[str] = field(default_factory=list)


def parse_flags(text: str) -> list[str]:
    """Split ``[WPA2-PSK-CCMP][ESS]`` into ``["WPA2-PSK-CCMP", "ESS"]``."""
    text = text.removeprefix("[").removesuffix("]")
    if not text:
        return []
    return text.split("][")


def parse_mac(text: str) -> str:
    """Validate a 6-octet MAC address and return it colon-separated, lowercase.

    Raises:
        ValueError: If ``text`` is not a MAC address.
    """
    if not _MAC_RE.match(text):
        raise ValueError(f"invalid MAC address {text!r}")
    return text.replace("-", ":").lower()


def parse_networks(raw: bytes) -> list[Network]:
    """Decode a LIST_NETWORKS reply.

    Raises:
        ValueError: On a wrong column count or a non-numeric id.
    """
    networks = []
    for row in _rows(raw, columns=4):
        try:
            network_id = int(row[0])
        except ValueError as exc:
            raise ValueError(f"parse id: {exc}") from exc

        networks.append(
            Network(id=network_id, ssid=row[1], bssid=row[2], flags=parse_flags(row[3]))
        )
    return networks


def parse_scan_results(raw: bytes) -> list[AccessPoint]:
    """Decode a SCAN_RESULTS reply.

    Raises:
        ValueError: On a wrong column count or a malformed field.
    """
    access_points = []
    for row in _rows(raw, columns=5):
        try:
            bssid = parse_mac(row[0])
        except ValueError as exc:
            raise ValueError(f"parse mac: {exc}") from exc

        try:
            frequency = int(row[1])
        except ValueError as exc:
            raise ValueError(f"parse frequency: {exc}") from exc

        try:
            signal = int(row[2])
        except ValueError as exc:
            raise ValueError(f"parse signal strength: {exc}") from exc

        access_points.append(
            AccessPoint(
                bssid=bssid,
                ssid=row[4],
                frequency=frequency,
                signal_strength=signal,
                flags=parse_flags(row[3]),
            )
        )
    return access_points


def _rows(raw: bytes, *, columns: int) -> list[list[str]]:
    """Return the data rows of a tabular reply, header and blank lines removed."""
    text = raw.decode("utf-8", errors="replace")
    _, _, body = text.partition("\n")

    # SSIDs may contain quote characters, so quoting is disabled.
    reader = csv.reader(io.StringIO(body), delimiter="\t", quoting=csv.QUOTE_NONE)
    rows = []
    for line_no, row in enumerate(reader, start=2):
        if not row:
            continue
        if len(row) != columns:
            raise ValueError(
                f"line {line_no}: wrong number of fields, expected {columns} got {len(row)}"
            )
        rows.append(row)
    return rows

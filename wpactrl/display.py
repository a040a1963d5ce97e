"""Output formatting for rich terminal display.

Renders daemon replies, network and scan tables, and events.
"""

from rich.markup import escape
from rich.table import Table
from rich.text import Text

from .networks import AccessPoint, Network
from .protocol import Event

# wpa_supplicant debug levels carried in the <N> event prefix
_SEVERITY_STYLES = {
    0: "dim",        # MSG_EXCESSIVE
    1: "dim",        # MSG_MSGDUMP
    2: "dim",        # MSG_DEBUG
    3: "cyan",       # MSG_INFO
    4: "yellow",     # MSG_WARNING
    5: "bold red",   # MSG_ERROR
}


def severity_style(severity: int) -> str:
    """Return a Rich style name for an event severity."""
    return _SEVERITY_STYLES.get(severity, "white")


def signal_color(dbm: int) -> str:
    """Return a Rich color for a signal level in dBm."""
    if dbm >= -50:
        return "green"
    if dbm >= -70:
        return "yellow"
    return "red"


def format_reply(raw: bytes) -> str:
    """Decode a raw reply for printing, without the trailing newline."""
    return raw.decode("utf-8", errors="replace").rstrip("\n")


def format_event(event: Event) -> Text:
    """Render one event as a single styled line."""
    if event.error is not None:
        return Text.assemble(("event error: ", "red"), str(event.error))

    if event.auth_request is not None:
        req = event.auth_request
        return Text.assemble(
            ("credential request ", "bold magenta"),
            (f"{req.kind} ", "magenta"),
            (f"network {req.network_id}: ", "dim"),
            req.text,
        )

    return Text.assemble(
        (f"<{event.severity}> ", "dim"),
        (event.message, severity_style(event.severity)),
    )


def format_networks(networks: list[Network]) -> Table:
    """Render LIST_NETWORKS entries as a table."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("SSID")
    table.add_column("BSSID", style="dim")
    table.add_column("Flags")

    for network in networks:
        flags = " ".join(network.flags)
        style = "bold green" if "CURRENT" in network.flags else None
        table.add_row(str(network.id), escape(network.ssid), network.bssid, flags, style=style)
    return table


def format_access_points(access_points: list[AccessPoint]) -> Table:
    """Render SCAN_RESULTS entries as a table, strongest signal first."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("SSID")
    table.add_column("BSSID", style="dim")
    table.add_column("Freq", justify="right")
    table.add_column("Signal", justify="right")
    table.add_column("Flags")

    for ap in sorted(access_points, key=lambda a: a.signal_strength, reverse=True):
        color = signal_color(ap.signal_strength)
        table.add_row(
            escape(ap.ssid),
            ap.bssid,
            str(ap.frequency),
            f"[{color}]{ap.signal_strength}[/{color}]",
            " ".join(ap.flags),
        )
    return table

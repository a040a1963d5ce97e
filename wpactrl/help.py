"""Help text for the wpactrl REPL.

Dot-commands are handled by the client itself; every other line is sent
to wpa_supplicant as a control command.
"""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import commands

console = Console()

# --- Dot-commands ---

GLOBAL_HELP: dict[str, str] = {
    "help": (
        "Show help for commands.\n"
        "  .help          — Overview of dot-commands and daemon commands\n"
        "  .help <topic>  — Detailed help for one command"
    ),
    "events": (
        "Subscribe to daemon events; they are printed after each command.\n"
        "  .events                      — All events\n"
        "  .events CTRL-EVENT-CONNECTED — Only the named events"
    ),
    "stop": "Cancel the subscription started with .events.",
    "scan": (
        "List access points, scanning first if the daemon has none cached.\n"
        "  .scan          — Wait up to 2 seconds for scan results"
    ),
    "networks": "List configured networks (LIST_NETWORKS) as a table.",
    "ping": "Check that the daemon is alive.",
    "quit": "Detach, close both sockets and exit.",
}

# --- Daemon commands ---

COMMAND_HELP: dict[str, str] = {
    commands.PING: "Liveness check; the daemon answers PONG.",
    commands.STATUS: "Show the current connection state.",
    commands.LEVEL: (
        "Change the debug level of events sent to this client.\n"
        "  LEVEL 2        — Include debug messages"
    ),
    commands.INTERFACES: "List interfaces handled by the daemon.",
    commands.SCAN: "Request a new BSS scan.",
    commands.SCAN_RESULTS: "Show the latest scan results.",
    commands.BSS: (
        "Show detailed information for one BSS.\n"
        "  BSS 0                  — First entry of the BSS table\n"
        "  BSS 00:11:22:33:44:55  — Entry by BSSID"
    ),
    commands.SIGNAL_POLL: "Report signal strength and link speed.",
    commands.LIST_NETWORKS: "List configured networks.",
    commands.ADD_NETWORK: "Add a new network; prints its id.",
    commands.REMOVE_NETWORK: (
        "Remove a network.\n"
        "  REMOVE_NETWORK 1    — Remove network 1\n"
        "  REMOVE_NETWORK all  — Remove every network"
    ),
    commands.SET_NETWORK: (
        "Set a network variable.\n"
        '  SET_NETWORK 0 ssid "home"\n'
        '  SET_NETWORK 0 psk "passphrase"'
    ),
    commands.GET_NETWORK: (
        "Read a network variable.\n"
        "  GET_NETWORK 0 ssid"
    ),
    commands.SELECT_NETWORK: "Select one network and disable all others.",
    commands.ENABLE_NETWORK: "Enable a network.",
    commands.DISABLE_NETWORK: "Disable a network.",
    commands.SAVE_CONFIG: "Write the current configuration to the config file.",
    commands.RECONFIGURE: "Reload the configuration file.",
    commands.DISCONNECT: "Disconnect and wait for REASSOCIATE or RECONNECT.",
    commands.RECONNECT: "Reconnect if currently disconnected.",
    commands.REASSOCIATE: "Force reassociation.",
    commands.TERMINATE: "Terminate wpa_supplicant.",
}


def print_help_overview() -> None:
    """Print the dot-command and daemon command tables."""
    global_table = Table(title="Client Commands", show_header=True, title_style="bold")
    global_table.add_column("Command", style="cyan", no_wrap=True)
    global_table.add_column("Description")

    for cmd, text in GLOBAL_HELP.items():
        global_table.add_row(f".{cmd}", text.split("\n")[0])

    console.print(global_table)
    console.print()

    command_table = Table(title="Daemon Commands", show_header=True, title_style="bold")
    command_table.add_column("Command", style="cyan", no_wrap=True)
    command_table.add_column("Description")

    for cmd, text in COMMAND_HELP.items():
        command_table.add_row(cmd, text.split("\n")[0])

    console.print(command_table)


def print_help_topic(topic: str) -> None:
    """Print detailed help for one command (with or without leading dot)."""
    clean = topic.lstrip(".")

    if clean.lower() in GLOBAL_HELP:
        console.print(Panel(
            GLOBAL_HELP[clean.lower()],
            title=f".{clean.lower()}",
            title_align="left",
            border_style="cyan",
        ))
        return

    if clean.upper() in COMMAND_HELP:
        console.print(Panel(
            COMMAND_HELP[clean.upper()],
            title=clean.upper(),
            title_align="left",
            border_style="cyan",
        ))
        return

    console.print(f"[red]No help available for '{topic}'[/red]")
    console.print("[dim]Type .help for a list of available commands[/dim]")

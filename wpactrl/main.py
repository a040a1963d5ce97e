"""Click CLI entry point for wpactrl.

Connects to wpa_supplicant and either runs one command given on the
command line or hands off to the interactive REPL.
"""

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .client import WPAClient
from .display import format_reply
from .errors import TransportError, WPAError

console = Console()


@click.command(context_settings={"ignore_unknown_options": True})
@click.option(
    "--socket",
    "-p",
    "address",
    default="wlan0",
    show_default=True,
    envvar="WPACTRL_SOCKET",
    help="Control socket path, interface name, or udp://host:port.",
)
@click.option(
    "--local-dir",
    default=None,
    type=click.Path(file_okay=False),
    envvar="WPACTRL_LOCAL_DIR",
    help="Directory for the client's own socket files (default /tmp).",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log socket activity.")
@click.argument("command", nargs=-1, type=click.UNPROCESSED)
@click.version_option(version=__version__, prog_name="wpactrl")
def cli(address: str, local_dir: str | None, verbose: bool, command: tuple[str, ...]) -> None:
    """Control wpa_supplicant over its control socket.

    With COMMAND, run it once and print the reply. Without, start a REPL.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )

    try:
        client = WPAClient(address, local_dir=local_dir)
    except TransportError as exc:
        console.print(f"[red]Connection failed:[/red] {escape(str(exc))}")
        sys.exit(1)

    if command:
        sys.exit(_run_once(client, command))

    _print_banner(client)

    from .repl import run_repl

    run_repl(client)


def _run_once(client: WPAClient, command: tuple[str, ...]) -> int:
    """Execute a single command and return the process exit status."""
    try:
        reply = client.execute(command[0].upper(), *command[1:])
    except WPAError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        return 1
    finally:
        try:
            client.close()
        except WPAError as exc:
            console.print(f"[red]Close failed:[/red] {escape(str(exc))}")

    console.print(escape(format_reply(reply)), highlight=False)
    return 0


def _print_banner(client: WPAClient) -> None:
    console.print()
    console.print("[bold]wpactrl[/bold] — wpa_supplicant control client", highlight=False)
    console.print(f"[dim]v{__version__} connected to {escape(client.address)}[/dim]")
    console.print("[dim]Type .help for commands, .quit to exit[/dim]")
    console.print()

"""Interactive REPL for wpa_supplicant.

Reads lines via prompt_toolkit. Lines starting with '.' are client-side
dot-commands; anything else is sent to the daemon as a control command
and the reply is printed. Events from an active .events subscription are
printed after each line.
"""

from dataclasses import dataclass

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document
from prompt_toolkit.formatted_text import HTML
from rich.console import Console
from rich.markup import escape

from .client import WPAClient
from .display import format_access_points, format_event, format_networks, format_reply
from .errors import WPAError
from .help import COMMAND_HELP, GLOBAL_HELP, print_help_overview, print_help_topic
from .history import get_history
from .subscriptions import Subscription

console = Console()

# Sentinel returned by handle_dot_command to end the loop.
QUIT = object()


@dataclass
class ReplState:
    """Mutable REPL state shared between dot-commands."""

    subscription: Subscription | None = None


def run_repl(client: WPAClient) -> None:
    """Run the interactive loop until .quit or Ctrl-D.

    Args:
        client: A connected WPAClient; closed on exit.
    """
    state = ReplState()
    session: PromptSession = PromptSession(history=get_history())
    completer = _command_completer()

    try:
        while True:
            try:
                line = session.prompt(_prompt(client, state), completer=completer)
            except EOFError:
                console.print("\nGoodbye")
                break
            except KeyboardInterrupt:
                continue

            trimmed = line.strip()
            if not trimmed:
                _print_events(state)
                continue

            if trimmed.startswith("."):
                result = handle_dot_command(trimmed, client=client, state=state)
                if result is QUIT:
                    console.print("Goodbye")
                    break
                if result is not None:
                    console.print(result)
            else:
                console.print(run_command(client, trimmed), highlight=False)

            _print_events(state)
    finally:
        try:
            client.close()
        except WPAError as exc:
            console.print(f"[red]Close failed:[/red] {escape(str(exc))}")


def run_command(client: WPAClient, line: str) -> str:
    """Send one control command line and return printable output.

    The command name is upper-cased; arguments are passed through
    verbatim so quoted values reach the daemon unchanged.
    """
    parts = line.split()
    command, args = parts[0].upper(), parts[1:]
    try:
        return escape(format_reply(client.execute(command, *args)))
    except WPAError as exc:
        return f"[red]Error:[/red] {escape(str(exc))}"


def handle_dot_command(line: str, *, client: WPAClient, state: ReplState):
    """Handle a dot-command.

    Returns:
        - A string or Rich renderable to print.
        - QUIT to end the REPL.
        - None when output was already printed.
    """
    parts = line.strip().split()
    cmd = parts[0].lower()
    args = parts[1:]

    match cmd:
        case ".quit" | ".exit":
            return QUIT

        case ".help":
            if args:
                print_help_topic(args[0])
            else:
                print_help_overview()
            return None

        case ".ping":
            return "[green]PONG[/green]" if client.ping() else "[red]No reply[/red]"

        case ".events":
            if state.subscription is not None and not state.subscription.closed:
                client.stop(state.subscription)
            try:
                state.subscription = client.notify(*args)
            except WPAError as exc:
                state.subscription = None
                return f"[red]Attach failed:[/red] {escape(str(exc))}"
            what = ", ".join(args) if args else "all events"
            return f"[dim]Listening for {escape(what)}[/dim]"

        case ".stop":
            if state.subscription is None:
                return "[dim]No active subscription[/dim]"
            client.stop(state.subscription)
            state.subscription = None
            return "[dim]Stopped listening[/dim]"

        case ".scan":
            try:
                return format_access_points(client.scan())
            except (WPAError, ValueError) as exc:
                return f"[red]Scan failed:[/red] {escape(str(exc))}"

        case ".networks":
            try:
                return format_networks(client.list_networks())
            except (WPAError, ValueError) as exc:
                return f"[red]Error:[/red] {escape(str(exc))}"

        case _:
            return f"[red]Unknown command: {escape(line.strip())}[/red]"


def _print_events(state: ReplState) -> None:
    """Print queued events from the active subscription."""
    subscription = state.subscription
    if subscription is None:
        return

    for event in subscription.drain():
        console.print(format_event(event))

    if subscription.closed:
        console.print("[dim]Event stream ended[/dim]")
        state.subscription = None


def _prompt(client: WPAClient, state: ReplState) -> HTML:
    """Build the prompt: interface name, plus a marker while listening."""
    marker = " <style fg='ansigreen'>*</style>" if state.subscription is not None else ""
    return HTML(
        f"<style fg='ansigray'>[{_escape_html(client.address)}]</style>{marker} <b>&gt;</b> "
    )


def _escape_html(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


class _DotAwareCompleter(Completer):
    """Completer that treats '.' as part of the word being completed.

    Daemon commands complete case-insensitively to their upper-case form.
    """

    def __init__(self, words: list[str]) -> None:
        self.words = list(words)

    def get_completions(self, document: Document, complete_event):
        text = document.text_before_cursor
        space_idx = text.rfind(" ")
        if space_idx >= 0:
            # Only the command word is completed.
            return
        prefix = text.lower()

        for word in self.words:
            if word.lower().startswith(prefix):
                yield Completion(word, start_position=-len(text))


def _command_completer() -> _DotAwareCompleter:
    dot_cmds = [f".{cmd}" for cmd in GLOBAL_HELP]
    return _DotAwareCompleter(dot_cmds + list(COMMAND_HELP))

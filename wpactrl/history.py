"""History file management for the wpactrl REPL.

Uses prompt_toolkit's FileHistory to persist command history to
~/.wpactrl_history.
"""

import os

from prompt_toolkit.history import FileHistory

HISTORY_PATH = os.path.expanduser("~/.wpactrl_history")


def get_history(path: str = HISTORY_PATH) -> FileHistory:
    """Return a FileHistory instance for the REPL."""
    return FileHistory(path)

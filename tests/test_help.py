"""Tests for the help system: every command has help text."""

from unittest.mock import MagicMock

from wpactrl import commands
from wpactrl.help import (
    COMMAND_HELP,
    GLOBAL_HELP,
    print_help_overview,
    print_help_topic,
)
from wpactrl.repl import ReplState, handle_dot_command


class TestHelpCoverage:
    def test_dot_commands_have_help(self):
        expected = {"help", "events", "stop", "scan", "networks", "ping", "quit"}
        assert set(GLOBAL_HELP) >= expected

    def test_every_dot_command_is_handled(self):
        # Help entries must not advertise commands the REPL rejects.
        client = MagicMock()
        client.scan.return_value = []
        client.list_networks.return_value = []
        for name in GLOBAL_HELP:
            result = handle_dot_command(f".{name}", client=client, state=ReplState())
            assert not (isinstance(result, str) and "Unknown command" in result), name

    def test_daemon_commands_are_known(self):
        assert set(COMMAND_HELP) <= set(commands.ALL_COMMANDS)


class TestHelpTextQuality:
    def test_all_help_non_empty(self):
        for text in list(GLOBAL_HELP.values()) + list(COMMAND_HELP.values()):
            assert text.strip()

    def test_first_line_is_summary(self):
        for text in COMMAND_HELP.values():
            assert len(text.split("\n")[0]) < 80


class TestPrintHelp:
    def test_overview(self, capsys):
        print_help_overview()
        out = capsys.readouterr().out
        assert ".events" in out
        assert commands.SCAN_RESULTS in out

    def test_dot_topic(self, capsys):
        print_help_topic(".scan")
        assert "scan" in capsys.readouterr().out

    def test_daemon_topic_case_insensitive(self, capsys):
        print_help_topic("remove_network")
        assert "REMOVE_NETWORK all" in capsys.readouterr().out

    def test_unknown_topic(self, capsys):
        print_help_topic("bogus")
        assert "No help available" in capsys.readouterr().out

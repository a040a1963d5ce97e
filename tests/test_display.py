"""Tests for output formatting (display module)."""

from rich.table import Table

from wpactrl import commands
from wpactrl.display import (
    format_access_points,
    format_event,
    format_networks,
    format_reply,
    severity_style,
    signal_color,
)
from wpactrl.errors import EventParseError
from wpactrl.networks import AccessPoint, Network
from wpactrl.protocol import AuthRequest, Event


class TestSignalColor:
    def test_strong(self):
        assert signal_color(-30) == "green"
        assert signal_color(-50) == "green"

    def test_fair(self):
        assert signal_color(-51) == "yellow"
        assert signal_color(-70) == "yellow"

    def test_weak(self):
        assert signal_color(-77) == "red"


class TestSeverityStyle:
    def test_known_levels(self):
        assert severity_style(3) == "cyan"
        assert severity_style(5) == "bold red"

    def test_unknown_level(self):
        assert severity_style(9) == "white"


class TestFormatReply:
    def test_strips_trailing_newline(self):
        assert format_reply(b"OK\n") == "OK"

    def test_keeps_inner_lines(self):
        assert format_reply(b"a\nb\n") == "a\nb"

    def test_invalid_utf8(self):
        assert format_reply(b"\xffOK") == "�OK"


class TestFormatEvent:
    def test_plain(self):
        text = format_event(Event(severity=2, message=commands.EVENT_CONNECTED))
        assert text.plain == f"<2> {commands.EVENT_CONNECTED}"

    def test_error(self):
        text = format_event(Event(error=EventParseError("message too short: MSG")))
        assert text.plain == "event error: message too short: MSG"

    def test_auth_request(self):
        event = Event(
            severity=3,
            message="CTRL-REQ-",
            auth_request=AuthRequest(1, "PASSWORD", "Password needed for SSID foobar"),
        )
        assert format_event(event).plain == (
            "credential request PASSWORD network 1: Password needed for SSID foobar"
        )


class TestTables:
    def test_networks(self):
        table = format_networks([
            Network(0, "home", "any", ["CURRENT"]),
            Network(1, "cafe", "any", []),
        ])
        assert isinstance(table, Table)
        assert table.row_count == 2

    def test_access_points_sorted_by_signal(self):
        table = format_access_points([
            AccessPoint("24:00:ba:f8:65:df", "AP2", 2412, -77, []),
            AccessPoint("d0:7a:b5:31:23:a0", "AP0", 2472, -30, []),
            AccessPoint("00:1f:1f:37:42:d9", "AP1", 2442, -37, []),
        ])
        assert table.row_count == 3
        assert list(table.columns[0].cells) == ["AP0", "AP1", "AP2"]

    def test_ssid_markup_is_escaped(self):
        networks = format_networks([Network(0, "[bold]x", "any", [])])
        assert list(networks.columns[1].cells) == ["\\[bold]x"]

        access_points = format_access_points([
            AccessPoint("d0:7a:b5:31:23:a0", "[bold]x", 2472, -30, []),
        ])
        assert list(access_points.columns[0].cells) == ["\\[bold]x"]

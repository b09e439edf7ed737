"""Unit tests for CLI formatters."""

import json
from datetime import datetime, timezone
from io import StringIO
from unittest.mock import patch

from rich.console import Console

from metrofor_schedule.cli.formatters import (
    format_schedule_detailed,
    format_schedule_json,
    format_schedule_table,
    format_session,
    format_stations_json,
    format_stations_table,
)
from metrofor_schedule.core.models import ScheduleInfo, Session, Station


def capture_console() -> Console:
    return Console(file=StringIO(), width=120)


class TestFormatters:
    """Test CLI formatters."""

    def setup_method(self):
        """Set up test fixtures."""
        self.stations = [
            Station(id="20", name="VIRGÍLIO TÁVORA"),
            Station(id="21", name="JUSCELINO KUBITSCHECK"),
        ]
        self.sample_schedule = ScheduleInfo(
            origin="VIRGÍLIO TÁVORA",
            destination="JUSCELINO KUBITSCHECK",
            origin_estimated_time="23:01",
            destination_arrival_time="23:22",
            estimated_trip_duration="21 minutos",
            number_of_stations=8,
            next_schedule_1="23:31",
            next_schedule_2="00:01",
        )

    def test_format_stations_table(self):
        """Test station table formatting."""
        console = capture_console()
        with patch("metrofor_schedule.cli.formatters.console", console):
            format_stations_table(self.stations)

        output = console.file.getvalue()
        assert "Estações" in output
        assert "VIRGÍLIO TÁVORA" in output
        assert output.index("VIRGÍLIO") < output.index("JUSCELINO")

    def test_format_stations_table_empty(self):
        """Test station table formatting without stations."""
        console = capture_console()
        with patch("metrofor_schedule.cli.formatters.console", console):
            format_stations_table([])

        assert "No stations found." in console.file.getvalue()

    def test_format_stations_json(self):
        """Test station JSON formatting keeps accents and order."""
        output = format_stations_json(self.stations)
        assert "VIRGÍLIO TÁVORA" in output
        assert [s["id"] for s in json.loads(output)] == ["20", "21"]

    def test_format_schedule_table(self):
        """Test schedule table formatting."""
        console = capture_console()
        with patch("metrofor_schedule.cli.formatters.console", console):
            format_schedule_table(self.sample_schedule)

        output = console.file.getvalue()
        assert "VIRGÍLIO TÁVORA → JUSCELINO KUBITSCHECK" in output
        assert "23:01" in output
        assert "23:31, 00:01" in output

    def test_format_schedule_table_without_later_departures(self):
        """Test schedule table formatting when no later departures exist."""
        schedule = self.sample_schedule.model_copy(
            update={"next_schedule_1": "", "next_schedule_2": ""}
        )
        console = capture_console()
        with patch("metrofor_schedule.cli.formatters.console", console):
            format_schedule_table(schedule)

        assert "Later departures" in console.file.getvalue()

    def test_format_schedule_detailed(self):
        """Test detailed schedule formatting."""
        console = capture_console()
        with patch("metrofor_schedule.cli.formatters.console", console):
            format_schedule_detailed(self.sample_schedule)

        output = console.file.getvalue()
        assert "Schedule" in output
        assert "21 minutos" in output
        assert "• 00:01" in output

    def test_format_schedule_json(self):
        """Test schedule JSON formatting."""
        data = json.loads(format_schedule_json(self.sample_schedule))
        assert data == {
            "origin": "VIRGÍLIO TÁVORA",
            "destination": "JUSCELINO KUBITSCHECK",
            "origin_estimated_time": "23:01",
            "destination_arrival_time": "23:22",
            "estimated_trip_duration": "21 minutos",
            "number_of_stations": 8,
            "next_schedule_1": "23:31",
            "next_schedule_2": "00:01",
        }

    def test_format_session(self):
        """Test session formatting hides the full token."""
        session = Session(
            csrf_token="tok3nValue123",
            cookies="csrftoken=abc; sessionid=x",
            cookie_expires_at=datetime(2025, 3, 10, 23, 0, tzinfo=timezone.utc),
        )
        console = capture_console()
        with patch("metrofor_schedule.cli.formatters.console", console):
            format_session(session)

        output = console.file.getvalue()
        assert "tok3nVal" in output
        assert "tok3nValue123" not in output
        assert "2025-03-10T23:00:00+00:00" in output

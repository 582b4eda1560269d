from __future__ import annotations

from datetime import date, datetime, time
from unittest.mock import MagicMock, patch

import pytest

from src.cli import main
from src.config import AppConfig, BoardConfig, FeedConfig, LoggingConfig
from src.data.fetcher import FetchResult
from src.data.realtime import RealtimeFeed
from src.data.realtime_client import RealtimeFeedError
from src.data.schedule import PickupType, Schedule, ServiceCalendar, StopVisit, Trip

CONFIG = AppConfig(
    feeds=FeedConfig("https://example.test/gtfs.zip", "https://example.test/rt", "tok", 5),
    board=BoardConfig("America/Toronto", time(2, 0)),
    log=LoggingConfig("INFO", "logs/"),
)


def _schedule() -> Schedule:
    daily = ServiceCalendar(*[True] * 7, start_date=date(2024, 1, 1), end_date=date(2024, 12, 31))
    trips = {
        "T2": Trip("T2", "DAILY", "Lucien-L'Allier", (StopVisit("S1", 1, PickupType.REGULAR, 9 * 3600),)),
        "T1": Trip("T1", "DAILY", "Mont-Saint-Hilaire", (StopVisit("S1", 1, PickupType.REGULAR, 8 * 3600 + 300),)),
    }
    return Schedule(stops={"S1": "Central"}, trips=trips, calendars={"DAILY": daily})


@pytest.fixture()
def app():
    fetcher = MagicMock()
    fetcher.fetch.return_value = FetchResult(_schedule(), RealtimeFeed(entities=()), 0.0)
    with patch("src.cli.load_config", return_value=CONFIG), patch(
        "src.cli.configure_logging"
    ), patch("src.cli.FeedFetcher", return_value=fetcher), patch(
        "src.cli.local_now", return_value=datetime(2024, 1, 3, 7, 0)
    ):
        yield fetcher


def test_prints_departures_in_order(app, capsys) -> None:
    assert main(["Central"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "08:05  Mont-Saint-Hilaire  (T1)",
        "09:00  Lucien-L'Allier  (T2)",
    ]


def test_unknown_station_exits_nonzero(app, capsys) -> None:
    assert main(["Nowhere"]) == 1
    assert capsys.readouterr().out == ""


def test_fetch_failure_prints_no_board(app, capsys) -> None:
    app.fetch.side_effect = RealtimeFeedError("Status 503")

    assert main(["Central"]) == 1
    assert capsys.readouterr().out == ""


def test_empty_window(app, capsys) -> None:
    with patch("src.cli.local_now", return_value=datetime(2024, 1, 3, 23, 0)):
        assert main(["Central"]) == 0

    assert capsys.readouterr().out.strip() == "No departures"


def test_config_error_exits_with_2(capsys) -> None:
    with patch("src.cli.load_config", side_effect=ValueError("Config file not found: x")):
        assert main(["Central"]) == 2

    assert "Config file not found" in capsys.readouterr().err

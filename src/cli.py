"""Print the upcoming departures for one station."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from src.config import load_config
from src.data.fetcher import FeedFetcher
from src.data.realtime_client import RealtimeClient, RealtimeFeedError
from src.data.static_loader import StaticScheduleError, StaticScheduleLoader
from src.log import configure_logging
from src.logic.board import local_now, resolve_board
from src.logic.departures import DataIntegrityError, Departure, StationNotFoundError

logger = logging.getLogger(__name__)

FATAL_ERRORS = (
    StaticScheduleError,
    RealtimeFeedError,
    StationNotFoundError,
    DataIntegrityError,
)


def format_departure(departure: Departure) -> str:
    return f"{departure.departs_at:%H:%M}  {departure.headsign}  ({departure.trip_id})"


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="departure-board",
        description="Show upcoming train departures for a station.",
    )
    parser.add_argument("station", help="Exact stop name as published in the static schedule")
    args = parser.parse_args(argv)

    try:
        config = load_config()
    except ValueError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    configure_logging(config.log)

    fetcher = FeedFetcher(
        StaticScheduleLoader(config.feeds.static_url, config.feeds.timeout_seconds),
        RealtimeClient(
            config.feeds.realtime_url,
            config.feeds.realtime_token,
            config.feeds.timeout_seconds,
        ),
    )

    try:
        result = fetcher.fetch()
        board = resolve_board(
            result.schedule,
            result.feed,
            args.station,
            local_now(config.board.timezone),
            config.board.day_transition,
        )
    except FATAL_ERRORS as exc:
        logger.error("Departure board failed: %s", exc)
        return 1

    if not board:
        print("No departures")
    for departure in board:
        print(format_departure(departure))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Display window filtering and the full departure pipeline."""

from __future__ import annotations

from datetime import datetime, time, timedelta
import logging
from typing import Iterable
from zoneinfo import ZoneInfo

from src.data.realtime import RealtimeFeed
from src.data.schedule import Schedule
from src.logic.delays import apply_delays
from src.logic.departures import (
    DataIntegrityError,
    Departure,
    candidate_dates,
    expand_departures,
    find_stop_ids,
)

logger = logging.getLogger(__name__)


def local_now(timezone: str) -> datetime:
    """Current wall-clock time in ``timezone``, without tzinfo."""
    return datetime.now(ZoneInfo(timezone)).replace(tzinfo=None)


def window_upper_bound(now: datetime, day_transition: time) -> datetime:
    """Last instant shown on the board.

    Before the day transition the board still belongs to the previous day and
    ends at today's transition; after it, the board runs to tomorrow's.
    """
    if now.time() > day_transition:
        try:
            tomorrow = now.date() + timedelta(days=1)
        except OverflowError as exc:
            raise DataIntegrityError(f"No day after {now.date()}") from exc
        return datetime.combine(tomorrow, day_transition)
    return datetime.combine(now.date(), day_transition)


def filter_and_sort(
    departures: Iterable[Departure],
    now: datetime,
    day_transition: time,
) -> list[Departure]:
    """Keep departures in [now, upper bound] and order them by time (stable)."""
    upper_bound = window_upper_bound(now, day_transition)
    kept = [d for d in departures if now <= d.departs_at <= upper_bound]
    kept.sort(key=lambda d: d.departs_at)
    return kept


def resolve_board(
    schedule: Schedule,
    feed: RealtimeFeed,
    station_name: str,
    now: datetime,
    day_transition: time,
) -> list[Departure]:
    """Return the ordered departures to display for ``station_name`` at ``now``."""
    stop_ids = find_stop_ids(schedule, station_name)
    logger.debug("Station %r maps to stops %s", station_name, sorted(stop_ids))

    scheduled = expand_departures(schedule, stop_ids, candidate_dates(now.date()))
    adjusted = apply_delays(scheduled, feed, stop_ids)
    board = filter_and_sort(adjusted, now, day_transition)

    logger.info("Resolved %d departures for %r", len(board), station_name)
    return board


__all__ = ["filter_and_sort", "local_now", "resolve_board", "window_upper_bound"]

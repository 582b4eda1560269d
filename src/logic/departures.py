"""Expand the static schedule into concrete departures for a station."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
import logging
from typing import Iterable, Sequence

from src.data.schedule import PickupType, Schedule
from src.logic.calendar import active_services

logger = logging.getLogger(__name__)


class StationNotFoundError(Exception):
    """Raised when no stop carries the requested station name."""


class DataIntegrityError(Exception):
    """Raised when a schedule record cannot produce a departure without guessing."""


@dataclass(frozen=True)
class Departure:
    """A trip leaving the station at a naive local timestamp."""

    trip_id: str
    departs_at: datetime
    headsign: str


def find_stop_ids(schedule: Schedule, station_name: str) -> frozenset[str]:
    """Return the ids of every stop named exactly ``station_name`` (case-sensitive)."""
    stop_ids = frozenset(
        stop_id for stop_id, name in schedule.stops.items() if name == station_name
    )
    if not stop_ids:
        raise StationNotFoundError(f"Station name not found: {station_name!r}")
    return stop_ids


def candidate_dates(today: date) -> tuple[date, date, date]:
    """Return (yesterday, today, tomorrow)."""
    try:
        return today - timedelta(days=1), today, today + timedelta(days=1)
    except OverflowError as exc:
        raise DataIntegrityError(f"Cannot build a 3-day window around {today}") from exc


def expand_departures(
    schedule: Schedule,
    stop_ids: Iterable[str],
    dates: Sequence[date],
) -> list[Departure]:
    """Return every scheduled boarding departure at ``stop_ids`` on ``dates``.

    A trip is expanded for a date only when its service id is active on that
    date, so offsets past 24:00:00 land on the following calendar day. A trip
    calling at several of the stop ids yields its first boarding visit only.
    """
    stop_ids = frozenset(stop_ids)
    active_by_date = {day: active_services(schedule, day) for day in dates}

    departures: list[Departure] = []
    for trip in schedule.trips.values():
        visit = next(
            (
                v
                for v in trip.stop_visits
                if v.stop_id in stop_ids and v.pickup_type is not PickupType.NOT_AVAILABLE
            ),
            None,
        )
        if visit is None:
            continue

        for day in dates:
            if trip.service_id not in active_by_date[day]:
                continue
            if visit.departure_seconds is None:
                raise DataIntegrityError(
                    f"Trip {trip.trip_id} has no departure_time at stop {visit.stop_id}"
                )
            if trip.headsign is None:
                raise DataIntegrityError(f"Trip {trip.trip_id} has no headsign")
            try:
                departs_at = datetime.combine(day, datetime.min.time()) + timedelta(
                    seconds=visit.departure_seconds
                )
            except OverflowError as exc:
                raise DataIntegrityError(
                    f"Departure of trip {trip.trip_id} on {day} is out of range"
                ) from exc
            departures.append(Departure(trip.trip_id, departs_at, trip.headsign))

    logger.debug("Expanded %d scheduled departures over %d dates", len(departures), len(dates))
    return departures


__all__ = [
    "DataIntegrityError",
    "Departure",
    "StationNotFoundError",
    "candidate_dates",
    "expand_departures",
    "find_stop_ids",
]

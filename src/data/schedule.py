"""In-memory structures for a parsed static GTFS schedule."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class ExceptionType(Enum):
    """calendar_dates.txt exception_type."""

    ADDED = 1
    REMOVED = 2


class PickupType(Enum):
    """stop_times.txt pickup_type."""

    REGULAR = 0
    NOT_AVAILABLE = 1
    PHONE_AGENCY = 2
    COORDINATE_WITH_DRIVER = 3


@dataclass(frozen=True)
class ServiceCalendar:
    """Weekly recurrence for a service id, valid between start and end (inclusive)."""

    monday: bool
    tuesday: bool
    wednesday: bool
    thursday: bool
    friday: bool
    saturday: bool
    sunday: bool
    start_date: date
    end_date: date

    def runs_on_weekday(self, weekday: int) -> bool:
        """Return the flag for a ``date.weekday()`` value (Monday is 0)."""
        flags = (
            self.monday,
            self.tuesday,
            self.wednesday,
            self.thursday,
            self.friday,
            self.saturday,
            self.sunday,
        )
        return flags[weekday]

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class CalendarException:
    """Dated override of a service id's weekly recurrence."""

    date: date
    exception_type: ExceptionType


@dataclass(frozen=True)
class StopVisit:
    """A trip's scheduled call at one stop.

    ``departure_seconds`` counts from midnight of the service day and may
    exceed 86400 for trips running past midnight.
    """

    stop_id: str
    stop_sequence: int
    pickup_type: PickupType
    departure_seconds: int | None


@dataclass(frozen=True)
class Trip:
    trip_id: str
    service_id: str
    headsign: str | None
    stop_visits: tuple[StopVisit, ...]


@dataclass(frozen=True)
class Schedule:
    """Static schedule tables keyed by their GTFS ids."""

    stops: dict[str, str | None]
    trips: dict[str, Trip]
    calendars: dict[str, ServiceCalendar] = field(default_factory=dict)
    calendar_exceptions: dict[str, list[CalendarException]] = field(default_factory=dict)


__all__ = [
    "CalendarException",
    "ExceptionType",
    "PickupType",
    "Schedule",
    "ServiceCalendar",
    "StopVisit",
    "Trip",
]

"""Download and parse a static GTFS schedule archive."""

from __future__ import annotations

import csv
from datetime import date, datetime
import io
import logging
from typing import Any
import zipfile
import zlib

import requests

from src.data.schedule import (
    CalendarException,
    ExceptionType,
    PickupType,
    Schedule,
    ServiceCalendar,
    StopVisit,
    Trip,
)

logger = logging.getLogger(__name__)

WEEKDAY_COLUMNS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class StaticScheduleError(Exception):
    """Raised when the static schedule cannot be fetched or parsed."""


class StaticScheduleLoader:
    """Fetches the published GTFS zip and parses it into a Schedule."""

    def __init__(self, url: str, timeout_seconds: int = 30) -> None:
        self._url = url
        self._timeout_seconds = timeout_seconds

    def load(self) -> Schedule:
        logger.info("Fetching static schedule from %s", self._url)
        try:
            response = requests.get(self._url, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise StaticScheduleError(f"Static schedule request failed: {exc}") from exc

        if response.status_code != 200:
            raise StaticScheduleError(
                f"Static schedule request failed: Status {response.status_code}"
            )

        logger.info("Downloaded static schedule (%d bytes)", len(response.content))
        return parse_schedule_archive(response.content)


def parse_schedule_archive(data: bytes) -> Schedule:
    """Parse the bytes of a GTFS zip into a Schedule."""
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as exc:
        raise StaticScheduleError("Static schedule is not a valid zip archive") from exc

    with archive:
        names = {name.rsplit("/", 1)[-1].lower(): name for name in archive.namelist()}

        def rows(filename: str, required: bool) -> list[dict[str, str]]:
            member = names.get(filename)
            if member is None:
                if required:
                    raise StaticScheduleError(f"Static schedule is missing {filename}")
                return []
            try:
                raw = archive.read(member)
                reader = csv.DictReader(io.TextIOWrapper(io.BytesIO(raw), encoding="utf-8-sig", newline=""))
                return list(reader)
            except (zipfile.BadZipFile, zlib.error, UnicodeDecodeError, csv.Error) as exc:
                raise StaticScheduleError(f"Could not read {filename}: {exc}") from exc

        stops = _parse_stops(rows("stops.txt", required=True))
        visits = _parse_stop_times(rows("stop_times.txt", required=True))
        trips = _parse_trips(rows("trips.txt", required=True), visits)
        calendars = _parse_calendars(rows("calendar.txt", required=False))
        exceptions = _parse_calendar_dates(rows("calendar_dates.txt", required=False))

    logger.info(
        "Parsed static schedule: %d stops, %d trips, %d calendars, %d services with exceptions",
        len(stops),
        len(trips),
        len(calendars),
        len(exceptions),
    )
    return Schedule(
        stops=stops,
        trips=trips,
        calendars=calendars,
        calendar_exceptions=exceptions,
    )


def parse_gtfs_date(value: str) -> date:
    """Parse a GTFS ``YYYYMMDD`` date."""
    try:
        return datetime.strptime(value.strip(), "%Y%m%d").date()
    except ValueError as exc:
        raise StaticScheduleError(f"Invalid GTFS date: {value!r}") from exc


def parse_gtfs_time(value: str) -> int | None:
    """Parse ``H:MM:SS`` into seconds after service-day midnight; hours may exceed 23."""
    value = value.strip()
    if not value:
        return None
    parts = value.split(":")
    if len(parts) != 3:
        raise StaticScheduleError(f"Invalid GTFS time: {value!r}")
    try:
        hours, minutes, seconds = (int(part) for part in parts)
    except ValueError as exc:
        raise StaticScheduleError(f"Invalid GTFS time: {value!r}") from exc
    if hours < 0 or not 0 <= minutes < 60 or not 0 <= seconds < 60:
        raise StaticScheduleError(f"Invalid GTFS time: {value!r}")
    return hours * 3600 + minutes * 60 + seconds


def _require_column(row: dict[str, Any], column: str, filename: str) -> str:
    value = row.get(column)
    if value is None:
        raise StaticScheduleError(f"Missing column '{column}' in {filename}")
    return value.strip()


def _parse_stops(rows: list[dict[str, str]]) -> dict[str, str | None]:
    stops: dict[str, str | None] = {}
    for row in rows:
        stop_id = _require_column(row, "stop_id", "stops.txt")
        stops[stop_id] = (row.get("stop_name") or "").strip() or None
    return stops


def _parse_pickup_type(value: str | None) -> PickupType:
    value = (value or "").strip()
    if not value:
        return PickupType.REGULAR
    try:
        return PickupType(int(value))
    except ValueError as exc:
        raise StaticScheduleError(f"Invalid pickup_type: {value!r}") from exc


def _parse_stop_times(rows: list[dict[str, str]]) -> dict[str, list[StopVisit]]:
    visits: dict[str, list[StopVisit]] = {}
    for row in rows:
        trip_id = _require_column(row, "trip_id", "stop_times.txt")
        sequence_text = _require_column(row, "stop_sequence", "stop_times.txt")
        try:
            sequence = int(sequence_text)
        except ValueError as exc:
            raise StaticScheduleError(f"Invalid stop_sequence: {sequence_text!r}") from exc
        visits.setdefault(trip_id, []).append(
            StopVisit(
                stop_id=_require_column(row, "stop_id", "stop_times.txt"),
                stop_sequence=sequence,
                pickup_type=_parse_pickup_type(row.get("pickup_type")),
                departure_seconds=parse_gtfs_time(row.get("departure_time") or ""),
            )
        )
    return visits


def _parse_trips(
    rows: list[dict[str, str]], visits: dict[str, list[StopVisit]]
) -> dict[str, Trip]:
    trips: dict[str, Trip] = {}
    for row in rows:
        trip_id = _require_column(row, "trip_id", "trips.txt")
        headsign = (row.get("trip_headsign") or "").strip() or None
        trips[trip_id] = Trip(
            trip_id=trip_id,
            service_id=_require_column(row, "service_id", "trips.txt"),
            headsign=headsign,
            stop_visits=tuple(sorted(visits.get(trip_id, []), key=lambda v: v.stop_sequence)),
        )
    return trips


def _parse_calendars(rows: list[dict[str, str]]) -> dict[str, ServiceCalendar]:
    calendars: dict[str, ServiceCalendar] = {}
    for row in rows:
        service_id = _require_column(row, "service_id", "calendar.txt")
        flags = [_require_column(row, day, "calendar.txt") == "1" for day in WEEKDAY_COLUMNS]
        calendars[service_id] = ServiceCalendar(
            *flags,
            start_date=parse_gtfs_date(_require_column(row, "start_date", "calendar.txt")),
            end_date=parse_gtfs_date(_require_column(row, "end_date", "calendar.txt")),
        )
    return calendars


def _parse_calendar_dates(rows: list[dict[str, str]]) -> dict[str, list[CalendarException]]:
    exceptions: dict[str, list[CalendarException]] = {}
    for row in rows:
        service_id = _require_column(row, "service_id", "calendar_dates.txt")
        type_text = _require_column(row, "exception_type", "calendar_dates.txt")
        try:
            exception_type = ExceptionType(int(type_text))
        except ValueError as exc:
            raise StaticScheduleError(f"Invalid exception_type: {type_text!r}") from exc
        exceptions.setdefault(service_id, []).append(
            CalendarException(
                date=parse_gtfs_date(_require_column(row, "date", "calendar_dates.txt")),
                exception_type=exception_type,
            )
        )
    return exceptions


__all__ = [
    "StaticScheduleError",
    "StaticScheduleLoader",
    "parse_gtfs_date",
    "parse_gtfs_time",
    "parse_schedule_archive",
]

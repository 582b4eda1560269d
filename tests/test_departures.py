from __future__ import annotations

from datetime import date, datetime

import pytest

from src.data.schedule import (
    CalendarException,
    ExceptionType,
    PickupType,
    Schedule,
    ServiceCalendar,
    StopVisit,
    Trip,
)
from src.logic.departures import (
    DataIntegrityError,
    Departure,
    StationNotFoundError,
    candidate_dates,
    expand_departures,
    find_stop_ids,
)

TODAY = date(2024, 1, 3)  # Wednesday
DATES = candidate_dates(TODAY)


def _weekdays(*days: int) -> ServiceCalendar:
    flags = [i in days for i in range(7)]
    return ServiceCalendar(*flags, start_date=date(2024, 1, 1), end_date=date(2024, 12, 31))


def _visit(stop_id: str, seconds: int | None, seq: int = 1, pickup: PickupType = PickupType.REGULAR) -> StopVisit:
    return StopVisit(stop_id=stop_id, stop_sequence=seq, pickup_type=pickup, departure_seconds=seconds)


def _schedule(*trips: Trip, calendars=None, exceptions=None) -> Schedule:
    return Schedule(
        stops={"S1": "Central", "S2": "Central", "S3": "Harbour"},
        trips={trip.trip_id: trip for trip in trips},
        calendars=calendars if calendars is not None else {"DAILY": _weekdays(0, 1, 2, 3, 4, 5, 6)},
        calendar_exceptions=exceptions or {},
    )


def test_find_stop_ids_returns_all_platforms() -> None:
    schedule = _schedule()

    assert find_stop_ids(schedule, "Central") == frozenset({"S1", "S2"})


def test_find_stop_ids_is_case_sensitive() -> None:
    schedule = _schedule()

    with pytest.raises(StationNotFoundError):
        find_stop_ids(schedule, "central")


def test_candidate_dates() -> None:
    assert candidate_dates(TODAY) == (date(2024, 1, 2), TODAY, date(2024, 1, 4))


@pytest.mark.parametrize("day", [date.min, date.max])
def test_candidate_dates_overflow(day: date) -> None:
    with pytest.raises(DataIntegrityError):
        candidate_dates(day)


def test_daily_trip_expands_on_all_three_dates() -> None:
    trip = Trip("T1", "DAILY", "Harbour", (_visit("S1", 8 * 3600),))

    departures = expand_departures(_schedule(trip), {"S1", "S2"}, DATES)

    assert departures == [
        Departure("T1", datetime(2024, 1, 2, 8, 0), "Harbour"),
        Departure("T1", datetime(2024, 1, 3, 8, 0), "Harbour"),
        Departure("T1", datetime(2024, 1, 4, 8, 0), "Harbour"),
    ]


def test_overnight_offset_lands_on_next_day() -> None:
    trip = Trip("NIGHT", "TUE", "Harbour", (_visit("S1", 90000),))
    schedule = _schedule(trip, calendars={"TUE": _weekdays(1)})

    departures = expand_departures(schedule, {"S1"}, DATES)

    assert departures == [Departure("NIGHT", datetime(2024, 1, 3, 1, 0), "Harbour")]


def test_inactive_trip_not_expanded() -> None:
    trip = Trip("T1", "SUN", "Harbour", (_visit("S1", 8 * 3600),))
    schedule = _schedule(trip, calendars={"SUN": _weekdays(6)})

    assert expand_departures(schedule, {"S1"}, DATES) == []


def test_drop_off_only_visit_excluded() -> None:
    trip = Trip("T1", "DAILY", "Central", (_visit("S1", 8 * 3600, pickup=PickupType.NOT_AVAILABLE),))

    assert expand_departures(_schedule(trip), {"S1"}, DATES) == []


def test_phone_agency_pickup_is_boardable() -> None:
    trip = Trip("T1", "DAILY", "Harbour", (_visit("S1", 8 * 3600, pickup=PickupType.PHONE_AGENCY),))

    assert len(expand_departures(_schedule(trip), {"S1"}, [TODAY])) == 1


def test_trip_at_two_platforms_not_duplicated() -> None:
    both = Trip("T1", "DAILY", "Harbour", (_visit("S1", 8 * 3600, 1), _visit("S2", 8 * 3600 + 60, 2)))
    other = Trip("T2", "DAILY", "Harbour", (_visit("S2", 9 * 3600),))

    departures = expand_departures(_schedule(both, other), {"S1", "S2"}, [TODAY])

    assert departures == [
        Departure("T1", datetime(2024, 1, 3, 8, 0), "Harbour"),
        Departure("T2", datetime(2024, 1, 3, 9, 0), "Harbour"),
    ]


def test_second_platform_used_when_first_is_drop_off_only() -> None:
    trip = Trip(
        "T1",
        "DAILY",
        "Harbour",
        (
            _visit("S1", 8 * 3600, 1, pickup=PickupType.NOT_AVAILABLE),
            _visit("S2", 8 * 3600 + 120, 2),
        ),
    )

    departures = expand_departures(_schedule(trip), {"S1", "S2"}, [TODAY])

    assert departures == [Departure("T1", datetime(2024, 1, 3, 8, 2), "Harbour")]


def test_missing_departure_time_raises() -> None:
    trip = Trip("T1", "DAILY", "Harbour", (_visit("S1", None),))

    with pytest.raises(DataIntegrityError, match="T1"):
        expand_departures(_schedule(trip), {"S1"}, DATES)


def test_missing_headsign_raises() -> None:
    trip = Trip("T1", "DAILY", None, (_visit("S1", 8 * 3600),))

    with pytest.raises(DataIntegrityError, match="headsign"):
        expand_departures(_schedule(trip), {"S1"}, DATES)


def test_departure_past_calendar_range_raises() -> None:
    trip = Trip("T1", "LAST", "Harbour", (_visit("S1", 90000),))
    schedule = _schedule(
        trip,
        calendars={},
        exceptions={"LAST": [CalendarException(date.max, ExceptionType.ADDED)]},
    )

    with pytest.raises(DataIntegrityError):
        expand_departures(schedule, {"S1"}, [date.max])


def test_find_stop_ids_never_matches_unnamed_stops() -> None:
    schedule = Schedule(stops={"S1": "Central", "N1": None}, trips={})

    with pytest.raises(StationNotFoundError):
        find_stop_ids(schedule, "")

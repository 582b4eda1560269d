"""Active service ids for a calendar date."""

from __future__ import annotations

from datetime import date

from src.data.schedule import ExceptionType, Schedule


def active_services(schedule: Schedule, day: date) -> set[str]:
    """Return the service ids running on ``day``.

    Weekly recurrence within the validity range gives the base set; same-date
    exceptions are then applied in list order, so the last one for a service
    id wins.
    """
    weekday = day.weekday()
    active = {
        service_id
        for service_id, calendar in schedule.calendars.items()
        if calendar.runs_on_weekday(weekday) and calendar.covers(day)
    }

    for service_id, exceptions in schedule.calendar_exceptions.items():
        for exception in exceptions:
            if exception.date != day:
                continue
            if exception.exception_type is ExceptionType.ADDED:
                active.add(service_id)
            else:
                active.discard(service_id)
    return active


__all__ = ["active_services"]

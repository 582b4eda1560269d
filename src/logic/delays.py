"""Match real-time departure delays to scheduled departures."""

from __future__ import annotations

from dataclasses import replace
from datetime import timedelta
import logging
from typing import Collection, Iterable

from src.data.realtime import RealtimeFeed
from src.logic.departures import DataIntegrityError, Departure

logger = logging.getLogger(__name__)


def match_delay(feed: RealtimeFeed, trip_id: str, stop_ids: Collection[str]) -> int | None:
    """Return the reported departure delay in seconds for a trip at the station.

    Only the first trip update naming ``trip_id`` is consulted, in feed order.
    Within it, the first stop-time update at one of ``stop_ids`` that carries a
    departure delay is used.
    """
    for entity in feed.entities:
        update = entity.trip_update
        if update is None or update.trip_id != trip_id:
            continue
        for stop_time in update.stop_time_updates:
            if stop_time.stop_id in stop_ids and stop_time.departure_delay is not None:
                return stop_time.departure_delay
        return None
    return None


def apply_delays(
    departures: Iterable[Departure],
    feed: RealtimeFeed,
    stop_ids: Collection[str],
) -> list[Departure]:
    """Shift each departure by its matched delay; unmatched departures keep their time."""
    adjusted: list[Departure] = []
    matched = 0
    for departure in departures:
        delay = match_delay(feed, departure.trip_id, stop_ids)
        if delay is None:
            adjusted.append(departure)
            continue
        matched += 1
        try:
            departs_at = departure.departs_at + timedelta(seconds=delay)
        except OverflowError as exc:
            raise DataIntegrityError(
                f"Delay of {delay}s on trip {departure.trip_id} is out of range"
            ) from exc
        adjusted.append(replace(departure, departs_at=departs_at))

    logger.debug("Applied real-time delays to %d of %d departures", matched, len(adjusted))
    return adjusted


__all__ = ["apply_delays", "match_delay"]

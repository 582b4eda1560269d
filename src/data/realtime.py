"""Decoded GTFS-realtime trip updates."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StopTimeUpdate:
    stop_id: str | None
    departure_delay: int | None


@dataclass(frozen=True)
class TripUpdate:
    trip_id: str | None
    stop_time_updates: tuple[StopTimeUpdate, ...]


@dataclass(frozen=True)
class FeedEntity:
    entity_id: str
    trip_update: TripUpdate | None


@dataclass(frozen=True)
class RealtimeFeed:
    """Snapshot of a real-time feed, entities in wire order."""

    entities: tuple[FeedEntity, ...]


__all__ = ["FeedEntity", "RealtimeFeed", "StopTimeUpdate", "TripUpdate"]

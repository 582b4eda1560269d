"""GTFS-realtime trip update client."""

from __future__ import annotations

import logging

from google.protobuf.message import DecodeError
from google.transit import gtfs_realtime_pb2
import requests

from src.data.realtime import FeedEntity, RealtimeFeed, StopTimeUpdate, TripUpdate

logger = logging.getLogger(__name__)


class RealtimeFeedError(Exception):
    """Raised when the real-time feed request fails or its body cannot be decoded."""


class RealtimeClient:
    """Thin wrapper around the trip update endpoint using requests."""

    def __init__(self, url: str, token: str, timeout_seconds: int = 10) -> None:
        self._url = url
        self._token = token
        self._timeout_seconds = timeout_seconds

    def get_feed(self) -> RealtimeFeed:
        """Fetch and decode the current trip updates."""
        params = {"token": self._token} if self._token else None
        logger.info("Fetching real-time feed from %s", self._url)
        try:
            response = requests.get(self._url, params=params, timeout=self._timeout_seconds)
        except requests.RequestException as exc:
            raise RealtimeFeedError(f"Real-time feed request failed: {exc}") from exc

        if response.status_code != 200:
            body_text = response.text.strip()
            detail = f"Status {response.status_code}"
            if body_text:
                detail = f"{detail}, Body: {body_text}"
            raise RealtimeFeedError(f"Real-time feed request failed: {detail}")

        feed = decode_feed(response.content)
        logger.info("Decoded real-time feed: %d entities", len(feed.entities))
        return feed


def decode_feed(data: bytes) -> RealtimeFeed:
    """Decode a serialized FeedMessage into plain dataclasses."""
    message = gtfs_realtime_pb2.FeedMessage()
    try:
        message.ParseFromString(data)
    except DecodeError as exc:
        raise RealtimeFeedError("Real-time feed response was not a valid FeedMessage") from exc

    entities = []
    for entity in message.entity:
        trip_update = None
        if entity.HasField("trip_update"):
            trip_update = _convert_trip_update(entity.trip_update)
        entities.append(FeedEntity(entity_id=entity.id, trip_update=trip_update))
    return RealtimeFeed(entities=tuple(entities))


def _convert_trip_update(update: gtfs_realtime_pb2.TripUpdate) -> TripUpdate:
    trip_id = update.trip.trip_id if update.trip.HasField("trip_id") else None
    stop_time_updates = []
    for stop_time in update.stop_time_update:
        delay = None
        if stop_time.HasField("departure") and stop_time.departure.HasField("delay"):
            delay = stop_time.departure.delay
        stop_time_updates.append(
            StopTimeUpdate(
                stop_id=stop_time.stop_id if stop_time.HasField("stop_id") else None,
                departure_delay=delay,
            )
        )
    return TripUpdate(trip_id=trip_id, stop_time_updates=tuple(stop_time_updates))


__all__ = ["RealtimeClient", "RealtimeFeedError", "decode_feed"]

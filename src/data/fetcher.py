"""Fetch the static schedule and the real-time feed in parallel."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
import logging
import time

from src.data.realtime import RealtimeFeed
from src.data.realtime_client import RealtimeClient
from src.data.schedule import Schedule
from src.data.static_loader import StaticScheduleLoader

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchResult:
    """Both inputs of one board refresh."""

    schedule: Schedule
    feed: RealtimeFeed
    fetched_at: float


class FeedFetcher:
    """Loads both feeds on worker threads and waits for the pair."""

    def __init__(self, static_loader: StaticScheduleLoader, realtime_client: RealtimeClient) -> None:
        self._static_loader = static_loader
        self._realtime_client = realtime_client

    def fetch(self) -> FetchResult:
        """Return both feeds, or raise the first failure (static schedule checked first)."""
        started = time.monotonic()
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="feed") as pool:
            schedule_future = pool.submit(self._static_loader.load)
            feed_future = pool.submit(self._realtime_client.get_feed)
            schedule = schedule_future.result()
            feed = feed_future.result()
        logger.debug("Fetched both feeds in %.2fs", time.monotonic() - started)
        return FetchResult(schedule=schedule, feed=feed, fetched_at=time.time())


__all__ = ["FetchResult", "FeedFetcher"]

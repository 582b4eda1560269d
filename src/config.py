"""Configuration loader for the departure board."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import time
import logging
import os
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
import yaml


@dataclass(frozen=True)
class FeedConfig:
    """Static and real-time feed endpoints."""

    static_url: str
    realtime_url: str
    realtime_token: str
    timeout_seconds: int


@dataclass(frozen=True)
class BoardConfig:
    """Local time zone and the daily cutoff of the display window."""

    timezone: str
    day_transition: time


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""

    level: str
    log_dir: str


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""

    feeds: FeedConfig
    board: BoardConfig
    log: LoggingConfig


def _require_key(mapping: dict[str, Any], key: str, context: str) -> Any:
    if key not in mapping:
        raise ValueError(f"Missing required key '{key}' in {context} config")
    return mapping[key]


def _parse_day_transition(value: Any) -> time:
    # YAML reads an unquoted 2:00 as the sexagesimal integer 120.
    if not isinstance(value, str):
        raise ValueError("'day_transition' must be a quoted \"HH:MM\" string")
    try:
        return time.fromisoformat(value)
    except ValueError as exc:
        raise ValueError(f"Invalid day_transition: {value!r}") from exc


def _parse_log_level(value: Any) -> str:
    if not isinstance(value, str) or not isinstance(logging.getLevelName(value.upper()), int):
        raise ValueError(f"Invalid logging level: {value!r}")
    return value.upper()


def _parse_timezone(value: Any) -> str:
    try:
        ZoneInfo(str(value))
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: {value!r}") from exc
    return str(value)


def load_config(path: str = "config/config.yaml") -> AppConfig:
    """Load application configuration from a YAML file."""
    load_dotenv()
    token = os.environ.get("EXO_API_TOKEN", "")
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        raise ValueError(f"Config file not found: {path}") from exc

    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping at the top level")

    feeds_section = _require_key(data, "feeds", "feeds")
    board_section = _require_key(data, "board", "board")
    logging_section = _require_key(data, "logging", "logging")

    if not isinstance(feeds_section, dict):
        raise ValueError("'feeds' config must be a mapping")
    if not isinstance(board_section, dict):
        raise ValueError("'board' config must be a mapping")
    if not isinstance(logging_section, dict):
        raise ValueError("'logging' config must be a mapping")

    feeds = FeedConfig(
        static_url=_require_key(feeds_section, "static_url", "feeds"),
        realtime_url=_require_key(feeds_section, "realtime_url", "feeds"),
        realtime_token=token,
        timeout_seconds=feeds_section.get("timeout_seconds", 30),
    )

    board = BoardConfig(
        timezone=_parse_timezone(_require_key(board_section, "timezone", "board")),
        day_transition=_parse_day_transition(
            _require_key(board_section, "day_transition", "board")
        ),
    )

    log_config = LoggingConfig(
        level=_parse_log_level(_require_key(logging_section, "level", "logging")),
        log_dir=_require_key(logging_section, "log_dir", "logging"),
    )

    return AppConfig(feeds=feeds, board=board, log=log_config)

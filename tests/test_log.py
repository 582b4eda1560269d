from __future__ import annotations

import logging

from src.config import LoggingConfig
from src.log import LOG_FILENAME, configure_logging


def test_configure_logging_writes_to_log_dir(tmp_path) -> None:
    log_dir = tmp_path / "nested" / "logs"
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        configure_logging(LoggingConfig(level="debug", log_dir=str(log_dir)))
        logging.getLogger("src.test").debug("board refreshed")
        for handler in root.handlers:
            handler.flush()

        assert root.level == logging.DEBUG
        assert "board refreshed" in (log_dir / LOG_FILENAME).read_text(encoding="utf-8")
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

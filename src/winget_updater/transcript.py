"""
Run transcript.

Captures every console line of a run into a plain-text log file named after
the time the run started.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

TRANSCRIPT_FORMAT = "%(asctime)s %(levelname)s %(message)s"
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"
HEADER_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def default_transcript_path(log_dir: Path, now: Optional[datetime] = None) -> Path:
    """Path of the transcript for a run started at ``now``; safe on every filesystem."""
    now = now or datetime.now()
    return Path(log_dir) / f"winget-update_{now.strftime(TIMESTAMP_FORMAT)}.log"


class Transcript:
    """
    Context manager that mirrors root-logger output into a file.

    The handler is removed and the file closed on exit, whether the run
    finished normally or aborted.

    Example:
        with Transcript(path):
            logger.info("Updating...")  # also written to path
    """

    def __init__(self, path: Path, level: int = logging.INFO):
        self.path = Path(path)
        self.level = level
        self._handler: Optional[logging.FileHandler] = None
        self.started_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self._handler is not None

    def open(self) -> "Transcript":
        if self._handler is not None:
            return self

        self.path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(self.path, mode="a", encoding="utf-8")
        handler.setLevel(self.level)
        handler.setFormatter(logging.Formatter(TRANSCRIPT_FORMAT))

        root = logging.getLogger()
        if root.level > self.level:
            root.setLevel(self.level)
        root.addHandler(handler)
        self._handler = handler

        self.started_at = datetime.now()
        logger.info(
            f"Transcript started at {self.started_at.strftime(HEADER_TIME_FORMAT)}, "
            f"output file is {self.path}"
        )
        return self

    def close(self) -> None:
        if self._handler is None:
            return
        ended_at = datetime.now()
        elapsed = (ended_at - self.started_at).total_seconds() if self.started_at else 0.0
        logger.info(
            f"Transcript stopped at {ended_at.strftime(HEADER_TIME_FORMAT)} "
            f"after {elapsed:.1f}s, output file is {self.path}"
        )
        logging.getLogger().removeHandler(self._handler)
        self._handler.close()
        self._handler = None

    def __enter__(self) -> "Transcript":
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        if exc is not None:
            logger.error(f"Run ended with an unexpected error: {exc}")
        self.close()
        return False

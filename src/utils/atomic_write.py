"""
Atomic file writes.

The run summary is written to a temp file in the destination directory and
renamed into place, so a reader never sees a half-written report.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Union


def atomic_write_text(path: Union[str, Path], content: str) -> Path:
    """
    Write text content to a file atomically.

    Args:
        path: Destination file path
        content: Text content to write

    Returns:
        The destination path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    # Same directory as the target so os.replace stays on one filesystem
    fd, temp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
    )

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, path)
    except BaseException:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise

    return path


def atomic_write_json(path: Union[str, Path], data: Any, indent: int = 2) -> Path:
    """
    Serialize ``data`` as JSON and write it atomically.

    Args:
        path: Destination file path
        data: JSON-serializable data
        indent: JSON indentation (default 2)
    """
    content = json.dumps(data, indent=indent, ensure_ascii=False)
    return atomic_write_text(path, content + "\n")

# src/testely/lib/files.py
"""Filesystem probes used while resolving counterparts."""
import logging
import os
from pathlib import Path
from typing import Optional

from testely.lib.errors import NotADirectory

logger = logging.getLogger(__name__)

__all__ = [
    "closest",
    "distance",
    "ensure_dir",
    "exists",
]


def exists(path: Path) -> bool:
    """Check whether a path exists. Any OS error counts as missing."""
    logger.debug(f"Checking if file exists: {path}")
    try:
        path.stat()
    except (OSError, ValueError):
        return False
    return True


def ensure_dir(path: Path) -> None:
    """Create a directory and missing ancestors.

    Raises:
        NotADirectory: If the path exists but is not a directory
    """
    if exists(path):
        if not path.is_dir():
            raise NotADirectory(f"Path is not a folder: {path}")
        return
    logger.debug(f"Creating directory {path}")
    path.mkdir(parents=True, exist_ok=True)


def distance(path: Path, other: Path) -> int:
    """Number of segments in the relative path from `path` to `other`.

    Only meaningful as a proximity score: smaller is closer.
    """
    return len(os.path.relpath(other, start=path).split(os.sep))


def closest(filename: str, start_dir: Path) -> Optional[Path]:
    """Walk upward from start_dir and return the first `filename` found.

    Returns None once the filesystem root has been checked without a match.
    """
    start_dir = start_dir.absolute()
    for directory in (start_dir, *start_dir.parents):
        candidate = directory / filename
        if exists(candidate):
            return candidate
    return None

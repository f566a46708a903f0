# src/testely/lib/workspace.py
"""File search over a workspace directory tree."""
import fnmatch
import logging
import os
from pathlib import Path
from typing import Callable, Iterator, List, Optional

logger = logging.getLogger(__name__)

__all__ = [
    "EXCLUDED_DIRS",
    "Workspace",
]

EXCLUDED_DIRS = frozenset({"node_modules", ".git"})


class Workspace:
    """The folder a developer has open, and searches across it."""

    def __init__(self, root: Path) -> None:
        self.root = root.resolve()

    def find_files(self, pattern: str, base: Optional[Path] = None) -> List[Path]:
        """Find files whose name matches a shell-style pattern, below `base`.

        Args:
            pattern: fnmatch pattern for the file name, e.g. "*.ts"
            base: Directory to search from, defaults to the workspace root

        Returns:
            Sorted list of matching files, skipping excluded directories
        """
        return self._find(lambda name: fnmatch.fnmatchcase(name, pattern), pattern, base)

    def find_by_name(self, filename: str, base: Optional[Path] = None) -> List[Path]:
        """Find every file called exactly `filename` below `base`.

        The name is compared literally, so "[id].ts" only matches itself.
        """
        return self._find(lambda name: name == filename, filename, base)

    def walk(self, base: Path) -> Iterator[Path]:
        """Yield every file below `base` without entering excluded directories"""
        for dirpath, dirnames, filenames in os.walk(base):
            dirnames[:] = [d for d in dirnames if d not in EXCLUDED_DIRS]
            for filename in filenames:
                yield Path(dirpath) / filename

    def _find(self, match: Callable[[str], bool], label: str, base: Optional[Path]) -> List[Path]:
        base = (base or self.root).resolve()
        if not base.is_dir():
            logger.warning(f"Search base does not exist: {base}")
            return []

        matches = [path for path in self.walk(base) if match(path.name)]
        logger.debug(f"Found {len(matches)} match(es) for {label} under {base}")
        return sorted(matches)

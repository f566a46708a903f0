# src/testely/lib/strategies.py
"""Location strategies and the fallback resolution algorithm.

A project builds one table per direction, holding exactly one
ResolveStrategy per LocationStrategy in declaration order. The engine tries
the configured entry first, then every other entry in table order, and
reports the first one whose counterpart exists.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Protocol, Sequence

from testely.lib.domain import Direction, LocationStrategy, ResolveStrategyResult, SuffixConvention
from testely.lib.errors import NoStrategy, Unsupported

logger = logging.getLogger(__name__)

__all__ = [
    "NESTED_TEST_DIRS",
    "ROOT_TEST_DIRS",
    "ResolveStrategy",
    "StrategyEngine",
    "find_strategy",
    "source_directory",
    "candidate_test_dirs",
]

NESTED_TEST_DIRS = {
    LocationStrategy.SAME_DIRECTORY_NESTED_TEST: "__test__",
    LocationStrategy.SAME_DIRECTORY_NESTED_TESTS: "__tests__",
}
ROOT_TEST_DIRS = ("test", "tests")


class Notifier(Protocol):
    def info(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


@dataclass(frozen=True)
class ResolveStrategy:
    """One row of a resolution table"""
    strategy: LocationStrategy
    resolve: Callable[[Path], ResolveStrategyResult]


def find_strategy(table: Sequence[ResolveStrategy], strategy: LocationStrategy) -> ResolveStrategy:
    for entry in table:
        if entry.strategy is strategy:
            return entry
    raise NoStrategy(f"No resolver registered for strategy '{strategy.value}'")


def candidate_test_dirs(strategy: LocationStrategy, source: Path, root: Path) -> List[Path]:
    """Folders that may hold the test of `source`, most preferred first."""
    if strategy is LocationStrategy.SAME_DIRECTORY:
        return [source.parent]
    if strategy in NESTED_TEST_DIRS:
        return [source.parent / NESTED_TEST_DIRS[strategy]]
    if strategy is LocationStrategy.ROOT_TEST_FOLDER_FLAT:
        return [root / name for name in ROOT_TEST_DIRS]
    raise Unsupported(f"Strategy '{strategy.value}' is not supported yet")


def source_directory(strategy: LocationStrategy, test: Path, root: Path) -> Optional[Path]:
    """Folder that holds the source of `test` under this strategy.

    Returns None when the test file is not laid out the way the strategy
    expects, e.g. a test outside any __tests__ folder.
    """
    if strategy is LocationStrategy.SAME_DIRECTORY:
        return test.parent
    if strategy in NESTED_TEST_DIRS:
        if test.parent.name == NESTED_TEST_DIRS[strategy]:
            return test.parent.parent
        return None
    if strategy is LocationStrategy.ROOT_TEST_FOLDER_FLAT:
        if test.parent in [root / name for name in ROOT_TEST_DIRS]:
            return root
        return None
    raise Unsupported(f"Strategy '{strategy.value}' is not supported yet")


class StrategyEngine:
    """Apply a resolution table with fallback across strategies"""

    def __init__(self, notifier: Notifier) -> None:
        self.notifier = notifier

    def resolve(
        self,
        table: Sequence[ResolveStrategy],
        active: LocationStrategy,
        path: Path,
        direction: Direction,
        suffix: Optional[SuffixConvention] = None,
    ) -> ResolveStrategyResult:
        """Resolve `path` with the configured strategy, falling back to the others.

        Args:
            table: One entry per LocationStrategy
            active: The configured strategy
            path: The file whose counterpart is wanted
            direction: Which counterpart is wanted, used in notices
            suffix: The configured suffix convention, for test lookups

        Returns:
            The first existing result, or the configured strategy's result
            (exists=False) carrying the canonical path

        Raises:
            NoStrategy: If the table has no entry for `active`
            Unsupported: If the configured strategy is not implemented
        """
        configured = find_strategy(table, active)
        logger.debug(f"Resolving {direction.value} for {path} using '{active.value}'")

        result = configured.resolve(path)
        if result.exists:
            self._notify_suffix(result, suffix)
            return result

        for entry in table:
            if entry is configured:
                continue
            try:
                candidate = entry.resolve(path)
            except Unsupported as e:
                logger.debug(f"Skipping '{entry.strategy.value}': {e}")
                continue
            if candidate.exists:
                self.notifier.info(
                    f"Found {direction.value} file using strategy '{entry.strategy.value}' "
                    f"instead of configured '{active.value}'."
                )
                self._notify_suffix(candidate, suffix)
                return candidate

        logger.debug(f"No existing {direction.value} file for {path}")
        return result

    def _notify_suffix(self, result: ResolveStrategyResult, suffix: Optional[SuffixConvention]) -> None:
        if suffix is not None and result.suffix is not None and result.suffix is not suffix:
            self.notifier.info(
                f"Found test file with extension '{result.suffix.value}' "
                f"instead of configured '{suffix.value}'."
            )

# src/testely/lib/domain.py
"""Domain model for testely.

This module contains the core domain types that represent the fundamental
concepts in testely: documents, location strategies, test suffix conventions
and the outcome of applying a strategy to a path.
"""
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

# Lower is closer. None means the project declines the file.
Likelihood = Optional[int]

LANGUAGE_IDS = {
    ".ts": "typescript",
    ".tsx": "typescriptreact",
    ".js": "javascript",
    ".jsx": "javascriptreact",
    ".java": "java",
}


class LocationStrategy(Enum):
    """Where a test file lives relative to its source file.

    Declaration order is the order in which strategies are tried when the
    configured one does not find a counterpart.
    """
    SAME_DIRECTORY = "same directory (next to the source file)"
    SAME_DIRECTORY_NESTED_TEST = "same directory (nested in __test__)"
    SAME_DIRECTORY_NESTED_TESTS = "same directory (nested in __tests__)"
    ROOT_TEST_FOLDER_FLAT = "root test folder (flat)"
    ROOT_TEST_FOLDER_NESTED = "root test folder (structured)"


class SuffixConvention(Enum):
    """Suffix inserted before the language extension of a test file."""
    SPEC = ".spec"
    TEST = ".test"


class Direction(Enum):
    """Which counterpart is being looked up."""
    TEST = "test"
    SOURCE = "source"


@dataclass(frozen=True)
class ResolveStrategyResult:
    """Outcome of applying one strategy to one path.

    When `exists` is False, `path` is still the canonical location the
    strategy would use, so it can be materialized.
    """
    exists: bool
    path: Path
    strategy: LocationStrategy
    suffix: Optional[SuffixConvention] = None  # Set for test lookups


@dataclass(frozen=True)
class Document:
    """A file as seen by the editor: where it is and what language it holds."""
    path: Path
    language_id: str
    scheme: str = "file"
    is_untitled: bool = False

    @classmethod
    def from_path(cls, path: Path) -> "Document":
        """Factory for a local file. Missing files count as unsaved."""
        path = path.expanduser().resolve()
        return cls(
            path=path,
            language_id=LANGUAGE_IDS.get(path.suffix.lower(), "plaintext"),
            is_untitled=not path.is_file(),
        )

    @classmethod
    def from_argument(cls, argument: str) -> "Document":
        """Build a document from a CLI argument: a plain path or a URI.

        Single-letter schemes are Windows drive letters, not URIs.
        """
        parsed = urlparse(argument)
        if len(parsed.scheme) > 1:
            if parsed.scheme != "file":
                path = Path(unquote(parsed.path))
                return cls(
                    path=path,
                    language_id=LANGUAGE_IDS.get(path.suffix.lower(), "plaintext"),
                    scheme=parsed.scheme,
                )
            return cls.from_path(Path(unquote(parsed.path)))
        return cls.from_path(Path(argument))

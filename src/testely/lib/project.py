# src/testely/lib/project.py
import logging
from functools import partial
from pathlib import Path
from typing import List, Optional

from testely.lib import files
from testely.lib.config import Chooser, TypescriptConfiguration
from testely.lib.domain import Direction, Document, Likelihood, LocationStrategy, ResolveStrategyResult, SuffixConvention
from testely.lib.errors import SourceNotFound, Unsupported
from testely.lib.strategies import (
    ROOT_TEST_DIRS,
    Notifier,
    ResolveStrategy,
    StrategyEngine,
    candidate_test_dirs,
    source_directory,
)
from testely.lib.workspace import Workspace

logger = logging.getLogger(__name__)

# Component-flavored first: "x.tsx" must not be read as "x.t" + "sx"
LANGUAGE_EXTENSIONS = (".tsx", ".ts")
LANGUAGE_IDS = ("typescript", "typescriptreact")
MANIFEST = "package.json"


def to_test_name(name: str, suffix: SuffixConvention) -> str:
    """widget.tsx -> widget.spec.tsx. The extension keeps its case."""
    for ext in LANGUAGE_EXTENSIONS:
        if name.lower().endswith(ext):
            stem, original_ext = name[:-len(ext)], name[-len(ext):]
            return f"{stem}{suffix.value}{original_ext}"
    raise Unsupported(f"Not a TypeScript file: {name}")


def to_source_name(name: str) -> str:
    """widget.spec.tsx -> widget.tsx. Names without a test suffix are returned as is."""
    for suffix in SuffixConvention:
        for ext in LANGUAGE_EXTENSIONS:
            if name.lower().endswith(f"{suffix.value}{ext}"):
                return f"{name[:-len(suffix.value + ext)]}{name[-len(ext):]}"
    return name


class Project:
    """A project kind without resolution support.

    Declines every file; calling any resolution operation is an error.
    Subclasses implement the operations for their ecosystem.
    """
    kind = "unknown"
    manifest: Optional[Path] = None

    def responsible_for(self, doc: Document) -> Likelihood:
        return None

    def is_test_file(self, path: Path) -> bool:
        raise Unsupported(f"Can't call is_test_file on {type(self).__name__}")

    def get_source_file_path(self, path: Path) -> Path:
        raise Unsupported(f"Can't call get_source_file_path on {type(self).__name__}")

    def get_test_file_path(self, path: Path) -> Path:
        raise Unsupported(f"Can't call get_test_file_path on {type(self).__name__}")


class JavaProject(Project):
    kind = "java"


class TypeScriptProject(Project):
    """A TypeScript project rooted at a package.json file"""
    kind = "typescript"

    TEST_FILE_EXTENSIONS = [
        f"{suffix.value}{ext}" for suffix in SuffixConvention for ext in LANGUAGE_EXTENSIONS
    ]

    def __init__(
        self,
        manifest: Path,
        *,
        config: TypescriptConfiguration,
        workspace: Workspace,
        notifier: Notifier,
        chooser: Chooser
    ) -> None:
        self.manifest = manifest.resolve()
        self.root = self.manifest.parent
        self.config = config
        self.workspace = workspace
        self.chooser = chooser
        self.engine = StrategyEngine(notifier)
        self.test_strategies = [
            ResolveStrategy(strategy, partial(self._resolve_test, strategy))
            for strategy in LocationStrategy
        ]
        self.source_strategies = [
            ResolveStrategy(strategy, partial(self._resolve_source, strategy))
            for strategy in LocationStrategy
        ]

    def __repr__(self) -> str:
        return f"TypeScriptProject({self.manifest})"

    # TODO: read jest/vitest configuration to pick up custom test file patterns
    def is_test_file(self, path: Path) -> bool:
        logger.debug(f"Checking if {path} is a test file")
        return any(path.name.lower().endswith(ext) for ext in self.TEST_FILE_EXTENSIONS)

    def responsible_for(self, doc: Document) -> Likelihood:
        if doc.language_id not in LANGUAGE_IDS:
            return None
        return files.distance(self.manifest, doc.path)

    def get_test_file_path(self, path: Path) -> Path:
        """Find the test of a source file, creating an empty one if none exists"""
        logger.debug(f"Getting test file path for {path}")
        strategy = self.config.get_location_strategy()
        suffix = self.config.get_test_file_extension()

        result = self.engine.resolve(
            self.test_strategies, strategy, path, Direction.TEST, suffix=suffix
        )
        if result.exists:
            return result.path

        files.ensure_dir(result.path.parent)
        result.path.touch()
        logger.info(f"Created test file {result.path}")
        return result.path

    def get_source_file_path(self, path: Path) -> Path:
        """Find the source of a test file.

        Raises:
            SourceNotFound: If no strategy finds an existing source file
        """
        logger.debug(f"Getting source file path for {path}")
        strategy = self.config.get_location_strategy()

        result = self.engine.resolve(self.source_strategies, strategy, path, Direction.SOURCE)
        if not result.exists:
            raise SourceNotFound(f"No source file found for {path.name}")
        return result.path

    def _suffixes(self) -> List[SuffixConvention]:
        active = self.config.get_test_file_extension()
        return [active] + [suffix for suffix in SuffixConvention if suffix is not active]

    def _resolve_test(self, strategy: LocationStrategy, path: Path) -> ResolveStrategyResult:
        directories = candidate_test_dirs(strategy, path, self.root)
        suffixes = self._suffixes()

        for directory in directories:
            for suffix in suffixes:
                candidate = directory / to_test_name(path.name, suffix)
                if files.exists(candidate):
                    return ResolveStrategyResult(True, candidate, strategy, suffix)

        # New tests go into the first folder that already exists
        target = next((d for d in directories if d.is_dir()), directories[0])
        return ResolveStrategyResult(False, target / to_test_name(path.name, suffixes[0]), strategy, suffixes[0])

    def _resolve_source(self, strategy: LocationStrategy, path: Path) -> ResolveStrategyResult:
        name = to_source_name(path.name)
        directory = source_directory(strategy, path, self.root)

        if directory is None:
            return ResolveStrategyResult(False, path.parent / name, strategy)
        if strategy is LocationStrategy.ROOT_TEST_FOLDER_FLAT:
            return self._search_source(name, strategy)

        candidate = directory / name
        return ResolveStrategyResult(files.exists(candidate), candidate, strategy)

    def _search_source(self, name: str, strategy: LocationStrategy) -> ResolveStrategyResult:
        """Search the whole project for a source file called `name`.

        Several matches are disambiguated by the user.

        Raises:
            SourceNotFound: If the user dismisses the choice
        """
        test_dirs = [self.root / d for d in ROOT_TEST_DIRS]
        matches = [
            match for match in self.workspace.find_by_name(name, base=self.root)
            if not any(match.is_relative_to(d) for d in test_dirs)
        ]
        logger.debug(f"Source candidates for {name}: {matches}")

        if not matches:
            return ResolveStrategyResult(False, self.root / name, strategy)
        if len(matches) == 1:
            return ResolveStrategyResult(True, matches[0], strategy)

        labels = [match.relative_to(self.root).as_posix() for match in matches]
        choice = self.chooser.choose(f"Multiple source files named {name}, pick one.", labels)
        if choice is None:
            raise SourceNotFound(f"No source file selected for {name}")
        return ResolveStrategyResult(True, matches[labels.index(choice)], strategy)

# tests/conftest.py
from pathlib import Path
from typing import List, Optional

import pytest

from testely.lib.config import ConfigStore, Configuration
from testely.lib.context import Context
from testely.lib.domain import LocationStrategy, SuffixConvention
from testely.lib.registry import ProjectRegistry
from testely.lib.workspace import Workspace


class FakeChooser:
    """Answers prompts from a list, then dismisses"""

    def __init__(self, answers: Optional[List[Optional[str]]] = None) -> None:
        self.answers = list(answers or [])
        self.prompts: List[tuple] = []

    def choose(self, title: str, options: List[str]) -> Optional[str]:
        self.prompts.append((title, list(options)))
        if self.answers:
            return self.answers.pop(0)
        return None


class RecordingNotifier:
    def __init__(self) -> None:
        self.infos: List[str] = []
        self.errors: List[str] = []

    def info(self, message: str) -> None:
        self.infos.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep settings from the developer's environment out of the tests"""
    for var in ("TESTELY_TYPESCRIPT_LOCATION", "TESTELY_TYPESCRIPT_EXTENSION",
                "TESTELY_WORKSPACE", "TESTELY_NO_INPUT"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def chooser() -> FakeChooser:
    return FakeChooser()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def ts_workspace(tmp_path: Path) -> Path:
    """Create a workspace with one TypeScript project"""
    root = (tmp_path / "workspace").resolve()
    (root / "src/components").mkdir(parents=True)
    (root / "package.json").write_text('{"name": "app"}')
    (root / "src/foo.ts").write_text("export const foo = 1;\n")
    (root / "src/components/Widget.tsx").write_text("export const Widget = () => null;\n")
    return root


def configure(root: Path, strategy: LocationStrategy, suffix: SuffixConvention) -> None:
    """Write settings for a workspace the way the config command does"""
    store = ConfigStore(root)
    store.set("testely", "typescript.location", strategy.value)
    store.set("testely", "typescript.extension", suffix.value)


@pytest.fixture
def make_context(chooser: FakeChooser, notifier: RecordingNotifier):
    """Build a Context for a workspace, optionally with settings"""

    def _make(root: Path, strategy: Optional[LocationStrategy] = None,
              suffix: SuffixConvention = SuffixConvention.SPEC) -> Context:
        if strategy is not None:
            configure(root, strategy, suffix)
        workspace = Workspace(root)
        store = ConfigStore(workspace.root)
        configuration = Configuration(store, chooser)
        registry = ProjectRegistry()
        registry.init(workspace, configuration, notifier, chooser)
        return Context(
            workspace=workspace,
            store=store,
            configuration=configuration,
            registry=registry,
            notifier=notifier,
            chooser=chooser,
        )

    return _make


@pytest.fixture
def project(ts_workspace: Path, make_context):
    """The TypeScript project of ts_workspace, configured for same-directory .spec tests"""
    context = make_context(ts_workspace, LocationStrategy.SAME_DIRECTORY, SuffixConvention.SPEC)
    return context.registry.projects[0]


@pytest.fixture
def configure_workspace():
    return configure

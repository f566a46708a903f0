# src/testely/lib/context.py
"""Everything a command needs, wired together for one workspace."""
from dataclasses import dataclass
from pathlib import Path

from testely.lib.config import Chooser, ConfigStore, Configuration
from testely.lib.registry import ProjectRegistry
from testely.lib.strategies import Notifier
from testely.lib.workspace import Workspace


@dataclass
class Context:
    workspace: Workspace
    store: ConfigStore
    configuration: Configuration
    registry: ProjectRegistry
    notifier: Notifier
    chooser: Chooser

    @classmethod
    def create(cls, root: Path, *, notifier: Notifier, chooser: Chooser) -> "Context":
        """Load settings and discover the projects under `root`"""
        workspace = Workspace(root)
        store = ConfigStore(workspace.root)
        configuration = Configuration(store, chooser)
        registry = ProjectRegistry()
        registry.init(workspace, configuration, notifier, chooser)
        return cls(
            workspace=workspace,
            store=store,
            configuration=configuration,
            registry=registry,
            notifier=notifier,
            chooser=chooser,
        )

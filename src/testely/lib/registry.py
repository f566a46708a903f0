# src/testely/lib/registry.py
"""Discovery of projects in a workspace and selection of the owning one."""
import logging
from typing import List, Optional

from testely.lib.config import Chooser, Configuration
from testely.lib.domain import Document
from testely.lib.project import MANIFEST, Project, TypeScriptProject
from testely.lib.strategies import Notifier
from testely.lib.workspace import Workspace

logger = logging.getLogger(__name__)


class ProjectRegistry:
    """The projects known in one workspace"""

    def __init__(self) -> None:
        self.projects: List[Project] = []

    def register(self, project: Project) -> bool:
        """Add a project unless one with the same manifest is already known.

        Returns:
            True if the project was added
        """
        if project.manifest is not None and any(
            p.manifest == project.manifest for p in self.projects
        ):
            logger.debug(f"Already registered: {project.manifest}")
            return False
        self.projects.append(project)
        return True

    def init(
        self,
        workspace: Workspace,
        configuration: Configuration,
        notifier: Notifier,
        chooser: Chooser,
    ) -> List[Project]:
        """Create a TypeScriptProject for every package.json in the workspace.

        Safe to call repeatedly: known manifests are not registered twice.

        Returns:
            The projects added by this call
        """
        added: List[Project] = []
        for manifest in workspace.find_by_name(MANIFEST):
            logger.debug(f"Found {MANIFEST} file: {manifest}")
            project = TypeScriptProject(
                manifest,
                config=configuration.get_typescript_configuration(),
                workspace=workspace,
                notifier=notifier,
                chooser=chooser,
            )
            if self.register(project):
                added.append(project)
        logger.debug(f"Registered {len(added)} new project(s) in {workspace.root}")
        return added

    def resolve(self, doc: Document) -> Optional[Project]:
        """Pick the project closest to the document; ties go to the first registered"""
        best: Optional[Project] = None
        best_score = 0

        for project in self.projects:
            likelihood = project.responsible_for(doc)
            if likelihood is not None and (best is None or likelihood < best_score):
                best = project
                best_score = likelihood

        logger.debug(f"Project for {doc.path}: {best}")
        return best


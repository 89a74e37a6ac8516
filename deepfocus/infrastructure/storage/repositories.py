"""Repository for the workspace aggregate.

Wraps the workspace JSON file with Result-based error handling and
repairs tier positions of externally edited data on load.
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from deepfocus.domain.shared.result import Err, Ok, Result, map_result
from deepfocus.domain.task import Project, Workspace, normalize_positions
from deepfocus.domain.types import TaskPath
from deepfocus.infrastructure.storage.json_storage import JsonStorage

logger = logging.getLogger(__name__)


class WorkspaceRepository:
    """Persistence for a single workspace file."""

    def __init__(self, path: Path, storage: JsonStorage | None = None) -> None:
        """Initialize the repository.

        Args:
            path: Location of the workspace JSON file.
            storage: JsonStorage to use. Defaults to one that keeps a backup
                of the previous file.
        """
        self.path = path
        self._storage = storage or JsonStorage(keep_backup=True)

    def exists(self) -> bool:
        """Check if the workspace file exists."""
        return self.path.exists()

    def load(self) -> Result[Workspace, str]:
        """Load the workspace.

        Every sibling group is renumbered so each tier is dense again.

        Returns:
            Ok(Workspace) if successful, Err(str) with error message if failed.
        """
        result = self._storage.load_json(self.path)
        if isinstance(result, Err):
            return result

        try:
            workspace = Workspace.model_validate(result.value)
        except ValidationError as e:
            return Err(f"Invalid workspace data in {self.path}: {e}")

        for project in workspace.projects:
            fixed = normalize_positions(project.tasks, TaskPath.project(project.id))
            if fixed:
                logger.warning(f"Repaired {len(fixed)} task positions in project '{project.name}'")
        return Ok(workspace)

    def save(self, workspace: Workspace) -> Result[None, str]:
        """Save the workspace.

        Returns:
            Ok(None) if successful, Err(str) with error message if failed.
        """
        return self._storage.save_json(self.path, workspace.model_dump(mode="json"))

    def create(self, project_names: list[str]) -> Result[Workspace, str]:
        """Create a new workspace file holding empty projects.

        Project ids are slugs of their names.

        Returns:
            Ok(Workspace) on success, or Err(str) if the file already exists.
        """
        if self.exists():
            return Err(f"Workspace already exists: {self.path}")

        projects: list[Project] = []
        for name in project_names:
            project_id = slugify(name)
            if not project_id or any(p.id == project_id for p in projects):
                return Err(f"Invalid or duplicate project name: {name!r}")
            projects.append(Project(id=project_id, name=name))

        workspace = Workspace(projects=projects)
        saved = self.save(workspace)
        if isinstance(saved, Ok):
            logger.info(f"Created workspace {self.path} with {len(projects)} projects")
        return map_result(saved, lambda _: workspace)


def slugify(name: str) -> str:
    """Turn a project name into a URL-safe id."""
    cleaned = "".join(c if c.isalnum() else "-" for c in name.strip().lower())
    return "-".join(part for part in cleaned.split("-") if part)

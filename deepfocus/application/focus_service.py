"""Focus session orchestration.

A ``FocusScheduler`` owns one focus session over a workspace: the subtree
it is rooted at, the cached leaf candidates, and the task currently
presented. Selection is delegated to ``pick_next``; tree mutations go
through the task service and the priority bucket manager, so every change
is reported back to the caller as a ChangeSet.

Session states::

    IDLE -> ACTIVE -> {ACTIVE, ALL_COMPLETE, EXHAUSTED} -> IDLE

Example:
    >>> scheduler = FocusScheduler(workspace, rng=random.Random(7))
    >>> scheduler.start(TaskPath.project("inbox"))
    >>> scheduler.complete()
    >>> scheduler.get_next()
"""

import logging
import random

from deepfocus.application.task_service import add_task, complete_task
from deepfocus.domain.focus import FocusState, pick_next
from deepfocus.domain.shared import Err, Ok, Result, flat_map, unwrap_or
from deepfocus.domain.task import (
    ChangeSet,
    Task,
    Workspace,
    find_project,
    find_task,
    find_task_path,
    leaves_under,
    tasks_at,
    toggle_defer,
    toggle_prefer,
)
from deepfocus.domain.types import TaskPath

logger = logging.getLogger(__name__)


class FocusScheduler:
    """Drives a focus session over one workspace.

    Attributes:
        workspace: The live tree the session reads and mutates.
        start_path: Root of the session's subtree, None while idle.
        candidate_leaves: Cached focusable leaves below ``start_path``.
        current: Task currently presented, None if nothing is.
        state: Where the session stands.
    """

    def __init__(self, workspace: Workspace, rng: random.Random | None = None) -> None:
        """Initialize an idle scheduler.

        Args:
            workspace: Workspace to focus on.
            rng: Random source for tie-breaks and project hops.
                Pass a seeded instance for reproducible sessions.
        """
        self.workspace = workspace
        self.rng = rng or random.Random()
        self.start_path: TaskPath | None = None
        self.candidate_leaves: list[Task] = []
        self.current: Task | None = None
        self.state = FocusState.IDLE

    # =========================================================================
    # Internals
    # =========================================================================

    def _recompute(self) -> None:
        self.candidate_leaves = leaves_under(self.workspace, self.start_path) if self.start_path else []

    def _pool(self) -> list[Task]:
        """Sibling group the descent starts from."""
        if self.start_path is None:
            return []
        children = tasks_at(self.workspace, self.start_path) or []
        if any(not child.completed for child in children):
            return children
        # The start task itself is the leaf once its subtree is exhausted
        return self.candidate_leaves

    def _pick(self, exclude_id: str | None = None) -> Task | None:
        picked = pick_next(self._pool(), exclude_id, self.rng)
        if picked is None and exclude_id is not None:
            picked = pick_next(self._pool(), None, self.rng)
        return picked

    def _settle(self) -> None:
        self.state = FocusState.ACTIVE if self.current is not None else FocusState.ALL_COMPLETE
        if self.current is not None:
            logger.debug(f"Focusing on '{self.current.name}' ({self.current.id})")
        else:
            logger.info(f"Nothing left to focus on under {self.start_path}")

    def _require_session(self) -> Result[TaskPath, str]:
        if self.state == FocusState.IDLE or self.start_path is None:
            return Err("No focus session is running")
        return Ok(self.start_path)

    def _require_current(self) -> Result[TaskPath, str]:
        session = self._require_session()
        if isinstance(session, Err):
            return session
        if self.current is None:
            return Err("No task is in focus")
        path = find_task_path(self.workspace, session.value.project_id, self.current.id)
        if path is None:
            return Err(f"Task '{self.current.name}' is no longer in the workspace")
        return Ok(path)

    # =========================================================================
    # Session lifecycle
    # =========================================================================

    def current_path(self) -> TaskPath | None:
        """Path of the task in focus, None if there is none."""
        return unwrap_or(self._require_current(), None)

    def start(self, path: TaskPath) -> Result[Task | None, str]:
        """Start a session rooted at a project or task.

        Returns:
            Ok(task) with the first task to present (None when the scope
            has nothing open), or Err(str) for a stale path.
        """
        if find_project(self.workspace, path.project_id) is None:
            return Err(f"Project not found: {path.project_id}")
        if path.is_task and find_task(self.workspace, path) is None:
            return Err(f"Task not found at path: {path}")

        self.start_path = path
        self._recompute()
        self.current = self._pick()
        self._settle()
        logger.info(f"Focus session started at {path} ({len(self.candidate_leaves)} leaves)")
        return Ok(self.current)

    def resume(self, path: TaskPath, current_id: str | None) -> Result[Task | None, str]:
        """Restore a session saved as its root path and presented task id.

        If the remembered task is gone or completed, a fresh task is
        picked as ``start`` would.
        """
        started = self.start(path)
        if isinstance(started, Err) or current_id is None:
            return started

        task_path = find_task_path(self.workspace, path.project_id, current_id)
        task = find_task(self.workspace, task_path) if task_path else None
        if task is not None and not task.completed:
            self.current = task
            self._settle()
        return Ok(self.current)

    def get_next(self) -> Result[Task | None, str]:
        """Present a different task than the current one, if one exists.

        Falls back to the current task when it is the only eligible leaf.
        """
        session = self._require_session()
        if isinstance(session, Err):
            return session

        self._recompute()
        exclude_id = self.current.id if self.current is not None else None
        self.current = self._pick(exclude_id)
        self._settle()
        return Ok(self.current)

    def complete(self) -> Result[ChangeSet, str]:
        """Complete the task in focus (and its subtree).

        The presented task does not change; call ``get_next`` to advance.
        """
        result = flat_map(self._require_current(), lambda path: complete_task(self.workspace, path))
        if isinstance(result, Ok):
            self._recompute()
        return result

    def keep_going(self) -> Result[Task | None, str]:
        """Leave an exhausted scope for the next one up.

        A task scope first offers the task itself; once that is done the
        session climbs one level. A project scope hops to a random other
        project with open work, or ends in EXHAUSTED when none is left.
        """
        session = self._require_session()
        if isinstance(session, Err):
            return session
        start_path = session.value

        if start_path.is_task:
            scope_task = find_task(self.workspace, start_path)
            if scope_task is not None and not scope_task.completed:
                self.current = scope_task
                self.candidate_leaves = [scope_task]
                self.state = FocusState.ACTIVE
                logger.info(f"Scope exhausted, presenting '{scope_task.name}' itself")
                return Ok(scope_task)

            self.start_path = start_path.parent()
            logger.info(f"Climbing from {start_path} to {self.start_path}")
        else:
            others = [
                project
                for project in self.workspace.projects
                if project.id != start_path.project_id and project.has_incomplete()
            ]
            if not others:
                self.current = None
                self.candidate_leaves = []
                self.state = FocusState.EXHAUSTED
                logger.info("Every project is complete, focus exhausted")
                return Ok(None)

            project = self.rng.choice(others)
            self.start_path = TaskPath.project(project.id)
            logger.info(f"Hopping from {start_path} to project '{project.name}'")

        self._recompute()
        self.current = self._pick()
        self._settle()
        return Ok(self.current)

    def end(self) -> None:
        """End the session and return to IDLE."""
        logger.info(f"Focus session at {self.start_path} ended")
        self.start_path = None
        self.candidate_leaves = []
        self.current = None
        self.state = FocusState.IDLE

    # =========================================================================
    # Edits from inside a session
    # =========================================================================

    def refresh(self) -> Result[Task | None, str]:
        """Re-sync with the tree after edits made outside the scheduler.

        If the task in focus gained open subtasks, the session re-roots
        into it; if it disappeared or was completed, a new task is picked.
        """
        session = self._require_session()
        if isinstance(session, Err):
            return session

        self._recompute()
        if self.current is None:
            self.current = self._pick()
            self._settle()
            return Ok(self.current)

        if any(leaf.id == self.current.id for leaf in self.candidate_leaves):
            return Ok(self.current)

        path = find_task_path(self.workspace, session.value.project_id, self.current.id)
        live = find_task(self.workspace, path) if path else None
        if path is not None and live is not None and not live.completed and not live.is_leaf():
            logger.info(f"'{live.name}' gained subtasks, focusing inside it")
            self.start_path = path
            self._recompute()

        self.current = self._pick()
        self._settle()
        return Ok(self.current)

    def break_down(self, names: list[str]) -> Result[ChangeSet, str]:
        """Split the task in focus into subtasks and focus inside it."""
        located = self._require_current()
        if isinstance(located, Err):
            return located
        path = located.value
        if not names or any(not name.strip() for name in names):
            return Err("Subtask names must not be empty")

        changes = ChangeSet()
        for name in names:
            added = add_task(self.workspace, path, name)
            if isinstance(added, Err):
                return added
            changes = changes.merge(added.value[1])

        self.start_path = path
        self._recompute()
        self.current = self._pick()
        self._settle()
        logger.info(f"Broke '{path}' into {len(names)} subtasks")
        return Ok(changes)

    def prefer(self) -> Result[ChangeSet, str]:
        """Toggle Preferred on the task in focus."""
        return flat_map(self._require_current(), lambda path: toggle_prefer(self.workspace, path))

    def defer(self) -> Result[ChangeSet, str]:
        """Toggle Deferred on the task in focus."""
        return flat_map(self._require_current(), lambda path: toggle_defer(self.workspace, path))

"""Task application service.

Orchestrates task lifecycle operations on the live tree: creation,
renaming, completion, deletion and moves between parents. Every mutation
returns ``Ok(ChangeSet)`` or ``Err(str)``; no I/O happens here.
"""

import logging
from uuid import uuid4

from pydantic import BaseModel

from deepfocus.domain.shared import Err, Ok, Result
from deepfocus.domain.task import (
    ChangeSet,
    Priority,
    Task,
    TaskAdded,
    TaskCompleted,
    TaskDeleted,
    TaskRenamed,
    TaskReopened,
    TaskReparented,
    Workspace,
    append_position,
    find_project,
    find_task,
    fold_tasks,
    release_slot,
    siblings_of,
    tasks_at,
    utcnow,
)
from deepfocus.domain.types import TaskPath

logger = logging.getLogger(__name__)


class WorkspaceStats(BaseModel):
    """Completion counts for one project or the whole workspace."""

    total: int
    completed: int
    open: int
    leaves: int

    @property
    def progress_percent(self) -> float:
        """Calculate completion percentage."""
        if self.total == 0:
            return 0.0
        return round(self.completed / self.total * 100, 1)


def new_task_id() -> str:
    """Generate an opaque id for a new task."""
    return f"task-{uuid4().hex[:12]}"


def add_task(
    workspace: Workspace,
    parent_path: TaskPath,
    name: str,
    task_id: str | None = None,
) -> Result[tuple[Task, ChangeSet], str]:
    """Append a new task to the end of a parent's Normal tier.

    Args:
        workspace: Workspace to modify.
        parent_path: Project root or task to add the task under.
        name: Name of the new task.
        task_id: Explicit id, generated when omitted.

    Returns:
        Ok((task, ChangeSet)) on success, or Err(str) if the parent is
        missing or the name is blank.
    """
    if not name.strip():
        return Err("Task name must not be empty")

    siblings = tasks_at(workspace, parent_path)
    if siblings is None:
        return Err(f"Parent not found at path: {parent_path}")

    task_id = task_id or new_task_id()
    if any(sibling.id == task_id for sibling in siblings):
        return Err(f"Task id '{task_id}' already exists under {parent_path}")

    task = Task(
        id=task_id,
        name=name.strip(),
        priority=Priority.NORMAL,
        position=append_position(siblings, Priority.NORMAL),
    )
    siblings.append(task)
    logger.info(f"Added task '{task.name}' under {parent_path}")

    event = TaskAdded(parent_path=str(parent_path), task_id=task.id, task_name=task.name)
    return Ok((task, ChangeSet(changed=(parent_path.child(task.id),), events=(event,))))


def rename_task(workspace: Workspace, path: TaskPath, name: str) -> Result[ChangeSet, str]:
    """Rename a task."""
    task = find_task(workspace, path)
    if task is None:
        return Err(f"Task not found at path: {path}")
    if not name.strip():
        return Err("Task name must not be empty")

    old_name = task.name
    task.name = name.strip()
    task.touch()

    event = TaskRenamed(task_path=str(path), old_name=old_name, new_name=task.name)
    return Ok(ChangeSet(changed=(path,), events=(event,)))


def _complete_subtree(task: Task, path: TaskPath) -> list[TaskPath]:
    """Complete every open task below ``task``; return their paths."""
    done: list[TaskPath] = []
    for subtask in task.subtasks:
        subtask_path = path.child(subtask.id)
        if not subtask.completed:
            subtask.completed = True
            subtask.completion_date = utcnow()
            subtask.touch()
            done.append(subtask_path)
        done.extend(_complete_subtree(subtask, subtask_path))
    return done


def complete_task(workspace: Workspace, path: TaskPath) -> Result[ChangeSet, str]:
    """Mark a task and its whole subtree completed.

    The task leaves its tier, so the siblings behind it move up one slot.
    Each newly completed task receives a completion timestamp.

    Returns:
        Ok(ChangeSet) on success, or Err(str) if the task is not found or
        already completed.
    """
    task = find_task(workspace, path)
    if task is None:
        return Err(f"Task not found at path: {path}")
    if task.completed:
        return Err(f"Task '{task.name}' is already completed")
    siblings = siblings_of(workspace, path)
    if siblings is None:
        return Err(f"Parent not found for path: {path}")

    shifted = release_slot(siblings, task)
    for sibling in shifted:
        sibling.touch()

    task.completed = True
    task.completion_date = utcnow()
    task.touch()
    subtree = _complete_subtree(task, path)

    logger.info(f"Completed '{task.name}' ({len(subtree)} subtasks)")

    changed = (path, *subtree, *(path.parent().child(s.id) for s in shifted))
    event = TaskCompleted(task_path=str(path), task_name=task.name, subtasks_completed=len(subtree))
    return Ok(ChangeSet(changed=changed, events=(event,)))


def reopen_task(workspace: Workspace, path: TaskPath) -> Result[ChangeSet, str]:
    """Mark a completed task open again, at the end of its tier.

    The completion timestamp is cleared. Subtasks stay completed.
    """
    task = find_task(workspace, path)
    if task is None:
        return Err(f"Task not found at path: {path}")
    if not task.completed:
        return Err(f"Task '{task.name}' is not completed")
    siblings = siblings_of(workspace, path)
    if siblings is None:
        return Err(f"Parent not found for path: {path}")

    task.position = append_position(siblings, task.priority)
    task.completed = False
    task.completion_date = None
    task.touch()

    event = TaskReopened(task_path=str(path), task_name=task.name)
    return Ok(ChangeSet(changed=(path,), events=(event,)))


def toggle_completion(workspace: Workspace, path: TaskPath) -> Result[ChangeSet, str]:
    """Complete an open task, or reopen a completed one."""
    task = find_task(workspace, path)
    if task is None:
        return Err(f"Task not found at path: {path}")
    if task.completed:
        return reopen_task(workspace, path)
    return complete_task(workspace, path)


def delete_task(workspace: Workspace, path: TaskPath) -> Result[ChangeSet, str]:
    """Remove a task and its subtree, closing the gap in its tier."""
    task = find_task(workspace, path)
    siblings = siblings_of(workspace, path)
    if task is None or siblings is None:
        return Err(f"Task not found at path: {path}")

    shifted = [] if task.completed else release_slot(siblings, task)
    for sibling in shifted:
        sibling.touch()
    siblings.remove(task)
    logger.info(f"Deleted '{task.name}' at {path}")

    changed = tuple(path.parent().child(s.id) for s in shifted)
    return Ok(ChangeSet(changed=changed, events=(TaskDeleted(task_path=str(path)),)))


def move_to_parent(
    workspace: Workspace,
    path: TaskPath,
    new_parent_path: TaskPath,
) -> Result[tuple[TaskPath, ChangeSet], str]:
    """Move a task with its subtree under another parent.

    The task keeps its tier and goes to the end of it at the destination.
    Moving into itself, into one of its own descendants, or to its current
    parent is refused.

    Returns:
        Ok((new_path, ChangeSet)) on success, or Err(str).
    """
    if not path.is_task or not new_parent_path:
        return Err("Only tasks can be moved, and only under a project or task")
    if new_parent_path.project_id != path.project_id and find_project(workspace, new_parent_path.project_id) is None:
        return Err(f"Project not found: {new_parent_path.project_id}")
    if new_parent_path == path or new_parent_path.is_descendant_of(path):
        return Err("Cannot move a task into itself or its own subtasks")
    if new_parent_path == path.parent():
        return Err("Task is already under that parent; reorder it instead")

    task = find_task(workspace, path)
    source = siblings_of(workspace, path)
    destination = tasks_at(workspace, new_parent_path)
    if task is None or source is None:
        return Err(f"Task not found at path: {path}")
    if destination is None:
        return Err(f"Parent not found at path: {new_parent_path}")
    if any(sibling.id == task.id for sibling in destination):
        return Err(f"Task id '{task.id}' already exists under {new_parent_path}")

    shifted = [] if task.completed else release_slot(source, task)
    for sibling in shifted:
        sibling.touch()
    source.remove(task)

    if not task.completed:
        task.position = append_position(destination, task.priority)
    task.touch()
    destination.append(task)

    new_path = new_parent_path.child(task.id)
    logger.info(f"Moved '{task.name}' from {path} to {new_path}")

    changed = (new_path, *(path.parent().child(s.id) for s in shifted))
    event = TaskReparented(old_path=str(path), new_path=str(new_path))
    return Ok((new_path, ChangeSet(changed=changed, events=(event,))))


def workspace_stats(workspace: Workspace, project_id: str | None = None) -> WorkspaceStats:
    """Count tasks by completion, for one project or every project.

    Args:
        workspace: The workspace to analyze.
        project_id: Restrict counts to this project when given.

    Returns:
        WorkspaceStats with counts of all tasks (not only leaves).
    """
    counts = {"total": 0, "completed": 0, "leaves": 0}

    def count(acc: dict[str, int], task: Task, _path: TaskPath) -> dict[str, int]:
        acc["total"] += 1
        if task.completed:
            acc["completed"] += 1
        elif task.is_leaf():
            acc["leaves"] += 1
        return acc

    for project in workspace.projects:
        if project_id is None or project.id == project_id:
            counts = fold_tasks(project.tasks, TaskPath.project(project.id), counts, count)

    return WorkspaceStats(
        total=counts["total"],
        completed=counts["completed"],
        open=counts["total"] - counts["completed"],
        leaves=counts["leaves"],
    )

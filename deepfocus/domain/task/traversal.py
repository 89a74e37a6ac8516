"""Pure tree traversal and the leaf selector.

All functions in this module are pure - no I/O, no mutation.
They take data in, return data out.
"""

from collections.abc import Callable, Iterator
from typing import TypeVar

from deepfocus.domain.types import TaskPath

from .models import TIER_ORDER, Priority, Project, Task, TaskWithPath, Workspace

T = TypeVar("T")


# =============================================================================
# Fundamental Operations
# =============================================================================


def iter_tasks(tasks: list[Task], base: TaskPath) -> Iterator[TaskWithPath]:
    """Yield every task below ``base`` depth-first, parents before children."""
    for task in tasks:
        path = base.child(task.id)
        yield TaskWithPath(task=task, path=path)
        yield from iter_tasks(task.subtasks, path)


def fold_tasks(
    tasks: list[Task],
    base: TaskPath,
    initial: T,
    f: Callable[[T, Task, TaskPath], T],
) -> T:
    """Fold over all tasks below ``base`` with their paths.

    Args:
        tasks: Top of the subtree to fold over
        base: Path of the list's owner (project or task)
        initial: Starting accumulator value
        f: Function (accumulator, task, path) -> new_accumulator

    Returns:
        Final accumulated value after visiting all tasks
    """
    acc = initial
    for item in iter_tasks(tasks, base):
        acc = f(acc, item.task, item.path)
    return acc


def find_first(
    tasks: list[Task],
    base: TaskPath,
    predicate: Callable[[Task, TaskPath], bool],
) -> TaskWithPath | None:
    """Find the first task matching a predicate (depth-first)."""
    for item in iter_tasks(tasks, base):
        if predicate(item.task, item.path):
            return item
    return None


# =============================================================================
# Lookup
# =============================================================================


def find_project(workspace: Workspace, project_id: str | None) -> Project | None:
    """Find a project by id."""
    if project_id is None:
        return None
    for project in workspace.projects:
        if project.id == project_id:
            return project
    return None


def _find_in(tasks: list[Task], task_ids: tuple[str, ...]) -> Task | None:
    current: Task | None = None
    level = tasks
    for task_id in task_ids:
        current = next((t for t in level if t.id == task_id), None)
        if current is None:
            return None
        level = current.subtasks
    return current


def find_task(workspace: Workspace, path: TaskPath) -> Task | None:
    """Find the task a path names.

    Returns:
        The task, or None for project paths and stale paths
    """
    if not path.is_task:
        return None
    project = find_project(workspace, path.project_id)
    if project is None:
        return None
    return _find_in(project.tasks, path.task_ids)


def tasks_at(workspace: Workspace, path: TaskPath) -> list[Task] | None:
    """Return the child list owned by a path.

    A project path yields the project's top-level tasks; a task path yields
    the task's subtasks. The returned list is the live list, not a copy.
    """
    project = find_project(workspace, path.project_id)
    if project is None:
        return None
    if path.is_project:
        return project.tasks
    task = _find_in(project.tasks, path.task_ids)
    return task.subtasks if task is not None else None


def siblings_of(workspace: Workspace, path: TaskPath) -> list[Task] | None:
    """Return the live sibling list that holds the task at ``path``."""
    if not path.is_task:
        return None
    return tasks_at(workspace, path.parent())


def find_task_path(workspace: Workspace, project_id: str, task_id: str) -> TaskPath | None:
    """Locate a task by id anywhere inside a project."""
    project = find_project(workspace, project_id)
    if project is None:
        return None
    found = find_first(
        project.tasks,
        TaskPath.project(project_id),
        lambda task, _path: task.id == task_id,
    )
    return found.path if found else None


def count_subtasks(task: Task) -> int:
    """Count every task below ``task``, completed or not."""
    return len(task.subtasks) + sum(count_subtasks(s) for s in task.subtasks)


# =============================================================================
# Tiers and visual order
# =============================================================================


def tier_members(siblings: list[Task], priority: Priority) -> list[Task]:
    """Incomplete siblings of one tier, ordered by position."""
    members = [t for t in siblings if not t.completed and t.priority == priority]
    return sorted(members, key=lambda t: (t.position, t.last_modified))


def tier_sizes(siblings: list[Task]) -> dict[Priority, int]:
    """Number of incomplete siblings in each tier."""
    sizes = {tier: 0 for tier in TIER_ORDER}
    for task in siblings:
        if not task.completed:
            sizes[task.priority] += 1
    return sizes


def visual_order(siblings: list[Task]) -> list[Task]:
    """Incomplete siblings as displayed: Preferred, Normal, then Deferred."""
    ordered: list[Task] = []
    for tier in TIER_ORDER:
        ordered.extend(tier_members(siblings, tier))
    return ordered


# =============================================================================
# Leaf Selector
# =============================================================================


def collect_leaves(tasks: list[Task]) -> list[Task]:
    """Collect focusable leaves of a level, descending into open subtasks."""
    leaves: list[Task] = []
    for task in visual_order(tasks):
        if task.is_leaf():
            leaves.append(task)
        else:
            leaves.extend(collect_leaves(task.incomplete_subtasks()))
    return leaves


def leaves_under(workspace: Workspace, root_path: TaskPath) -> list[Task]:
    """Return the current focusable leaf set for a subtree.

    If the subtree below an incomplete task is exhausted, the task itself
    is the sole leaf. A stale path, a completed task, or a project with
    nothing open yields an empty list; the caller tells those apart with
    ``has_incomplete``.
    """
    if root_path.is_task:
        task = find_task(workspace, root_path)
        if task is None or task.completed:
            return []
        leaves = collect_leaves(task.subtasks)
        return leaves or [task]

    project = find_project(workspace, root_path.project_id)
    if project is None:
        return []
    return collect_leaves(project.tasks)


def has_incomplete(workspace: Workspace, project_id: str | None) -> bool:
    """True if the project exists and has at least one open task."""
    project = find_project(workspace, project_id)
    return project is not None and project.has_incomplete()

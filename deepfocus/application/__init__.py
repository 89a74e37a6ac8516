"""Application service layer for deepfocus.

Services orchestrate domain operations without performing I/O.

Services:
    task_service - Task lifecycle (add, rename, complete, delete, move)
    focus_service - Focus session scheduling

Example usage:
    >>> from deepfocus.application import FocusScheduler
    >>> from deepfocus.domain.types import TaskPath
    >>>
    >>> scheduler = FocusScheduler(workspace)
    >>> result = scheduler.start(TaskPath.project("inbox"))
    >>> if is_ok(result) and result.value:
    ...     print(f"Focus on: {result.value.name}")
"""

from deepfocus.application.focus_service import FocusScheduler
from deepfocus.application.task_service import (
    WorkspaceStats,
    add_task,
    complete_task,
    delete_task,
    move_to_parent,
    new_task_id,
    rename_task,
    reopen_task,
    toggle_completion,
    workspace_stats,
)

__all__ = [
    # Task service
    "add_task",
    "rename_task",
    "complete_task",
    "reopen_task",
    "toggle_completion",
    "delete_task",
    "move_to_parent",
    "new_task_id",
    "workspace_stats",
    "WorkspaceStats",
    # Focus service
    "FocusScheduler",
]

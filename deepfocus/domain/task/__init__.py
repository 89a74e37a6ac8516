"""Task domain - the project/task tree and its priority buckets.

All exports are pure or mutate only the tree handed to them (no I/O).

Key Types:
    Priority - Preferred / Normal / Deferred tier
    Task - Tree node, a leaf when it has no open subtasks
    Project - Named top-level task list
    Workspace - Root aggregate of all projects
    TaskWithPath - Task with its location
    ChangeSet - Paths and events produced by a mutation

Traversal Functions:
    iter_tasks / fold_tasks / find_first - Fundamental walks
    find_project / find_task / tasks_at / siblings_of - Lookup
    tier_members / visual_order - Tier ordering
    leaves_under - Focusable leaf set of a subtree

Bucket Functions:
    move_with_priority_change - Drag-reorder across tiers
    toggle_prefer / toggle_defer - Tier toggles
    normalize_positions - Repair tier density
"""

from .buckets import (
    append_position,
    move_with_priority_change,
    normalize_positions,
    open_slot,
    release_slot,
    toggle_defer,
    toggle_prefer,
)
from .events import (
    TaskAdded,
    TaskCompleted,
    TaskDeleted,
    TaskMoved,
    TaskRenamed,
    TaskReopened,
    TaskReparented,
)
from .models import (
    TIER_ORDER,
    ChangeSet,
    Priority,
    Project,
    Task,
    TaskWithPath,
    Workspace,
    utcnow,
)
from .traversal import (
    collect_leaves,
    count_subtasks,
    find_first,
    find_project,
    find_task,
    find_task_path,
    fold_tasks,
    has_incomplete,
    iter_tasks,
    leaves_under,
    siblings_of,
    tasks_at,
    tier_members,
    tier_sizes,
    visual_order,
)

__all__ = [
    # Models
    "Priority",
    "TIER_ORDER",
    "Task",
    "Project",
    "Workspace",
    "TaskWithPath",
    "ChangeSet",
    "utcnow",
    # Traversal
    "iter_tasks",
    "fold_tasks",
    "find_first",
    "find_project",
    "find_task",
    "find_task_path",
    "tasks_at",
    "siblings_of",
    "count_subtasks",
    "tier_members",
    "tier_sizes",
    "visual_order",
    "collect_leaves",
    "leaves_under",
    "has_incomplete",
    # Buckets
    "append_position",
    "release_slot",
    "open_slot",
    "move_with_priority_change",
    "toggle_prefer",
    "toggle_defer",
    "normalize_positions",
    # Events
    "TaskAdded",
    "TaskRenamed",
    "TaskCompleted",
    "TaskReopened",
    "TaskMoved",
    "TaskReparented",
    "TaskDeleted",
]

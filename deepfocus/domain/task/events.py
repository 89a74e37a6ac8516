"""Task domain events.

Immutable records of tree mutations. They travel inside a ChangeSet so
that change-tracking can mark exactly the affected entities dirty.

All events are pure data structures - no I/O, no side effects.
"""

from deepfocus.domain.shared.events import DomainEvent


class TaskAdded(DomainEvent):
    """A new task was appended to a parent's Normal tier."""

    parent_path: str
    task_id: str
    task_name: str


class TaskRenamed(DomainEvent):
    """A task's name changed."""

    task_path: str
    old_name: str
    new_name: str


class TaskCompleted(DomainEvent):
    """A task (and its whole subtree) was marked completed."""

    task_path: str
    task_name: str
    subtasks_completed: int = 0


class TaskReopened(DomainEvent):
    """A completed task was marked incomplete again."""

    task_path: str
    task_name: str


class TaskMoved(DomainEvent):
    """A task changed tier and/or position inside its sibling group."""

    task_path: str
    old_priority: int
    new_priority: int
    old_position: int
    new_position: int


class TaskReparented(DomainEvent):
    """A task (with its subtree) moved under a different parent."""

    old_path: str
    new_path: str


class TaskDeleted(DomainEvent):
    """A task and its subtree were removed from the tree."""

    task_path: str

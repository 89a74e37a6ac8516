"""Task domain models.

Pure domain models for the project → task → subtask hierarchy. Uses
Pydantic for serialization compatibility with the storage layer.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import IntEnum

from pydantic import BaseModel, Field, field_validator

from deepfocus.domain.shared.events import DomainEvent
from deepfocus.domain.types import TaskPath


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime | None) -> datetime | None:
    """Treat naive timestamps as UTC and convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class Priority(IntEnum):
    """Priority tier of a task among its siblings."""

    PREFERRED = 1
    NORMAL = 0
    DEFERRED = -1


# Visual and descent order of the tiers
TIER_ORDER: tuple[Priority, ...] = (
    Priority.PREFERRED,
    Priority.NORMAL,
    Priority.DEFERRED,
)


class Task(BaseModel):
    """A node in the task tree.

    A task whose subtasks are all completed (or who has none) is a leaf,
    the unit of work Focus Mode presents. ``position`` is the task's rank
    inside its priority tier among incomplete siblings.
    """

    id: str
    name: str
    completed: bool = False
    completion_date: datetime | None = None
    priority: Priority = Priority.NORMAL
    position: int = Field(default=0, ge=0)
    subtasks: list["Task"] = Field(default_factory=list)
    last_modified: datetime = Field(default_factory=utcnow)

    @field_validator("completion_date", "last_modified")
    @classmethod
    def normalize_timestamps(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)

    def is_leaf(self) -> bool:
        """Check if this task has no incomplete subtasks."""
        return all(subtask.completed for subtask in self.subtasks)

    def incomplete_subtasks(self) -> list["Task"]:
        """Subtasks that are still open, in stored order."""
        return [subtask for subtask in self.subtasks if not subtask.completed]

    def touch(self) -> None:
        """Stamp the task as modified now."""
        self.last_modified = utcnow()


class Project(BaseModel):
    """A project: a named top-level task list.

    The top-level list follows the same tier/position rules as any
    subtask list.
    """

    id: str
    name: str
    tasks: list[Task] = Field(default_factory=list)
    last_modified: datetime = Field(default_factory=utcnow)

    @field_validator("last_modified")
    @classmethod
    def normalize_timestamps(cls, value: datetime) -> datetime:
        return as_utc(value)

    def has_incomplete(self) -> bool:
        """True if any top-level task is still open."""
        return any(not task.completed for task in self.tasks)


class Workspace(BaseModel):
    """Root aggregate holding every project of one user."""

    projects: list[Project] = Field(default_factory=list)


@dataclass(frozen=True)
class TaskWithPath:
    """A task together with its location in the workspace."""

    task: Task
    path: TaskPath


@dataclass(frozen=True)
class ChangeSet:
    """Outcome of a successful tree mutation.

    Attributes:
        changed: Paths of every task whose persisted fields changed,
            the mutated task included.
        events: Domain events describing the mutation.
    """

    changed: tuple[TaskPath, ...] = ()
    events: tuple[DomainEvent, ...] = field(default_factory=tuple)

    def merge(self, other: "ChangeSet") -> "ChangeSet":
        """Combine two change-sets, keeping the first occurrence of each path."""
        changed = list(self.changed)
        for path in other.changed:
            if path not in changed:
                changed.append(path)
        return ChangeSet(changed=tuple(changed), events=self.events + other.events)

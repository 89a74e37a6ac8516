"""Domain value objects for deepfocus.

Immutable value objects representing locations in the workspace.
"""

from dataclasses import dataclass

SEPARATOR = "/"


@dataclass(frozen=True)
class TaskPath:
    """Immutable path to a project root or a task.

    The first segment is always a project id; every further segment is the
    id of a task nested one level deeper. A single-segment path names the
    project's top-level task list.

    Example:
        path = TaskPath.from_string("inbox/t1/t7")
        path.project_id  # "inbox"
        path.parent()  # inbox/t1
        path.child("t9")  # inbox/t1/t7/t9
    """

    segments: tuple[str, ...]

    @classmethod
    def from_string(cls, path: str, separator: str = SEPARATOR) -> "TaskPath":
        """Create a TaskPath from a slash-separated (or custom separator) string.

        Empty segments are ignored so "inbox/" and "/inbox" both name the
        project root.
        """
        if not path:
            return cls(segments=())
        return cls(segments=tuple(s for s in path.split(separator) if s))

    @classmethod
    def project(cls, project_id: str) -> "TaskPath":
        """Return the path naming a project's root task list."""
        return cls(segments=(project_id,))

    def __str__(self) -> str:
        """Return the path as a slash-separated string."""
        return SEPARATOR.join(self.segments)

    @property
    def project_id(self) -> str | None:
        """Id of the project this path lives in, or None for an empty path."""
        if not self.segments:
            return None
        return self.segments[0]

    @property
    def task_ids(self) -> tuple[str, ...]:
        """Task id chain below the project."""
        return self.segments[1:]

    @property
    def is_project(self) -> bool:
        """True if the path names a project root."""
        return len(self.segments) == 1

    @property
    def is_task(self) -> bool:
        """True if the path names a task."""
        return len(self.segments) > 1

    def parent(self) -> "TaskPath":
        """Return a new TaskPath without the last segment.

        Returns:
            New TaskPath representing the parent location,
            or empty TaskPath if already at root
        """
        if len(self.segments) <= 1:
            return TaskPath(segments=())
        return TaskPath(segments=self.segments[:-1])

    def child(self, task_id: str) -> "TaskPath":
        """Return a new TaskPath with an appended segment."""
        return TaskPath(segments=self.segments + (task_id,))

    def is_descendant_of(self, ancestor: "TaskPath") -> bool:
        """True if this path lies strictly below ancestor."""
        if len(ancestor.segments) >= len(self.segments):
            return False
        return self.segments[: len(ancestor.segments)] == ancestor.segments

    def __bool__(self) -> bool:
        """Return True if the path has any segments."""
        return len(self.segments) > 0

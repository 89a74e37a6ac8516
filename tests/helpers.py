"""Builders and assertions shared by the test modules."""

from deepfocus.domain.task import TIER_ORDER, Priority, Project, Task, Workspace, tier_members


def task(
    task_id: str,
    priority: int = 0,
    position: int = 0,
    subtasks: list[Task] | None = None,
    completed: bool = False,
) -> Task:
    """Build a task named after its id."""
    return Task(
        id=task_id,
        name=task_id.replace("_", " ").title(),
        priority=Priority(priority),
        position=position,
        subtasks=subtasks or [],
        completed=completed,
    )


def project(project_id: str, tasks: list[Task]) -> Project:
    return Project(id=project_id, name=project_id.title(), tasks=tasks)


def single_project(tasks: list[Task], project_id: str = "project1") -> Workspace:
    """A workspace holding one project with the given top-level tasks."""
    return Workspace(projects=[project(project_id, tasks)])


def by_id(tasks: list[Task], task_id: str) -> Task:
    return next(t for t in tasks if t.id == task_id)


def slot(t: Task) -> tuple[int, int]:
    """(priority, position) of a task, for compact assertions."""
    return (int(t.priority), t.position)


def assert_dense(tasks: list[Task]) -> None:
    """Every tier of every sibling group below ``tasks`` is 0..n-1."""
    for tier in TIER_ORDER:
        positions = sorted(t.position for t in tier_members(tasks, tier))
        assert positions == list(range(len(positions))), (tier, positions)
    for t in tasks:
        assert_dense(t.subtasks)

"""Priority bucket manager.

Every sibling group (a project's top-level list or a task's subtasks) is
split into three tiers: Preferred, Normal and Deferred. Inside a tier the
incomplete siblings carry dense positions ``0..n-1``. The functions here
change a task's tier and/or position and shift its siblings so that the
density holds after every call, reporting every sibling they touched.

Mutations are in place on the live tree. Validation happens before the
first write, so an ``Err`` result means nothing was changed.
"""

import logging

from deepfocus.domain.shared import Err, Ok, Result
from deepfocus.domain.types import TaskPath

from .events import TaskMoved
from .models import TIER_ORDER, ChangeSet, Priority, Task, Workspace
from .traversal import find_task, siblings_of, tier_members, tier_sizes

logger = logging.getLogger(__name__)


# =============================================================================
# Slot helpers
# =============================================================================


def append_position(siblings: list[Task], priority: Priority) -> int:
    """Next free position at the end of a tier."""
    return tier_sizes(siblings)[priority]


def release_slot(siblings: list[Task], task: Task) -> list[Task]:
    """Close the gap ``task`` leaves in its tier.

    Every other incomplete sibling of the same tier positioned after the
    task moves up by one. The task itself is not modified.

    Returns:
        Siblings whose position changed
    """
    shifted: list[Task] = []
    for sibling in siblings:
        if sibling is task or sibling.completed or sibling.priority != task.priority:
            continue
        if sibling.position > task.position:
            sibling.position -= 1
            shifted.append(sibling)
    return shifted


def open_slot(
    siblings: list[Task],
    priority: Priority,
    position: int,
    moving: Task | None = None,
) -> list[Task]:
    """Make room at ``position`` in a tier.

    Every incomplete sibling of the tier at or after ``position`` moves
    down by one; ``moving`` is skipped.

    Returns:
        Siblings whose position changed
    """
    shifted: list[Task] = []
    for sibling in siblings:
        if sibling is moving or sibling.completed or sibling.priority != priority:
            continue
        if sibling.position >= position:
            sibling.position += 1
            shifted.append(sibling)
    return shifted


def _changed_paths(
    parent: TaskPath,
    moved: Task,
    shifted: list[Task],
    before: dict[str, int],
) -> tuple[TaskPath, ...]:
    # A sibling shifted out and back in again keeps its position
    paths = [parent.child(moved.id)]
    for sibling in shifted:
        path = parent.child(sibling.id)
        if sibling.position != before[sibling.id] and path not in paths:
            paths.append(path)
    return tuple(paths)


def _locate(workspace: Workspace, path: TaskPath) -> Result[tuple[Task, list[Task]], str]:
    task = find_task(workspace, path)
    if task is None:
        return Err(f"Task not found at path: {path}")
    if task.completed:
        return Err(f"Task '{task.name}' is completed and has no priority slot")
    siblings = siblings_of(workspace, path)
    if siblings is None:
        return Err(f"Parent not found for path: {path}")
    return Ok((task, siblings))


def _touch(tasks: list[Task]) -> None:
    for task in tasks:
        task.touch()


# =============================================================================
# Operations
# =============================================================================


def move_with_priority_change(
    workspace: Workspace,
    path: TaskPath,
    old_visual_index: int,
    new_visual_index: int,
    new_priority: Priority | int,
) -> Result[ChangeSet, str]:
    """Move a task to a visual index, possibly into another tier.

    Both indices are measured in the sibling group's visual order as it
    stands before the call. The destination tier's local slot is the
    visual index minus the size of all tiers shown above it (sizes taken
    before the move), clamped to the tier's size once the task has left
    its origin.

    Args:
        workspace: Workspace holding the task
        path: Path of the task to move
        old_visual_index: Current visual index of the task
        new_visual_index: Target visual index
        new_priority: Destination tier, may equal the current one

    Returns:
        Ok(ChangeSet) listing the moved task and every shifted sibling,
        or Err(str) for a stale path or an invalid tier.
    """
    try:
        destination = Priority(new_priority)
    except ValueError:
        return Err(f"Invalid priority: {new_priority}")

    located = _locate(workspace, path)
    if isinstance(located, Err):
        logger.warning(f"Move rejected: {located.error}")
        return located
    task, siblings = located.value

    old_priority = task.priority
    old_position = task.position

    sizes = tier_sizes(siblings)
    preceding = sum(sizes[tier] for tier in TIER_ORDER[: TIER_ORDER.index(destination)])
    destination_size = sizes[destination] - (1 if old_priority == destination else 0)
    local_position = max(0, min(new_visual_index - preceding, destination_size))

    before = {sibling.id: sibling.position for sibling in siblings}
    shifted = release_slot(siblings, task)
    shifted += open_slot(siblings, destination, local_position, moving=task)
    task.priority = destination
    task.position = local_position
    changed = _changed_paths(path.parent(), task, shifted, before)
    _touch([task, *(s for s in shifted if s.position != before[s.id])])

    logger.debug(
        f"Moved {path} from visual {old_visual_index} ({old_priority.name}:{old_position}) "
        f"to visual {new_visual_index} ({destination.name}:{local_position})"
    )

    event = TaskMoved(
        task_path=str(path),
        old_priority=old_priority,
        new_priority=destination,
        old_position=old_position,
        new_position=local_position,
    )
    return Ok(ChangeSet(changed=changed, events=(event,)))


def _toggle_tier(workspace: Workspace, path: TaskPath, tier: Priority) -> Result[ChangeSet, str]:
    located = _locate(workspace, path)
    if isinstance(located, Err):
        logger.warning(f"Priority toggle rejected: {located.error}")
        return located
    task, siblings = located.value

    old_priority = task.priority
    old_position = task.position

    before = {sibling.id: sibling.position for sibling in siblings}
    shifted = release_slot(siblings, task)
    if task.priority != tier:
        members = [t for t in tier_members(siblings, tier) if t is not task]
        task.priority = tier
        task.position = max((t.position for t in members), default=-1) + 1
    else:
        shifted += open_slot(siblings, Priority.NORMAL, 0, moving=task)
        task.priority = Priority.NORMAL
        task.position = 0
    changed = _changed_paths(path.parent(), task, shifted, before)
    _touch([task, *shifted])

    logger.info(f"{path}: {old_priority.name} -> {task.priority.name} at {task.position}")

    event = TaskMoved(
        task_path=str(path),
        old_priority=old_priority,
        new_priority=task.priority,
        old_position=old_position,
        new_position=task.position,
    )
    return Ok(ChangeSet(changed=changed, events=(event,)))


def toggle_prefer(workspace: Workspace, path: TaskPath) -> Result[ChangeSet, str]:
    """Prefer a task, or un-prefer it if it is already Preferred.

    Preferring appends the task to the end of the Preferred tier.
    Un-preferring puts it at the front of the Normal tier and shifts the
    existing Normal siblings down by one.
    """
    return _toggle_tier(workspace, path, Priority.PREFERRED)


def toggle_defer(workspace: Workspace, path: TaskPath) -> Result[ChangeSet, str]:
    """Defer a task, or un-defer it if it is already Deferred.

    Mirrors ``toggle_prefer``: deferring appends to the Deferred tier,
    un-deferring puts the task at the front of the Normal tier.
    """
    return _toggle_tier(workspace, path, Priority.DEFERRED)


def normalize_positions(tasks: list[Task], base: TaskPath) -> list[TaskPath]:
    """Renumber every tier of every sibling group below ``base`` densely.

    Existing order is kept (position, then last modification), which also
    fixes duplicates and gaps left by external edits.

    Returns:
        Paths of tasks whose position was rewritten
    """
    fixed: list[TaskPath] = []
    for tier in TIER_ORDER:
        for index, task in enumerate(tier_members(tasks, tier)):
            if task.position != index:
                task.position = index
                fixed.append(base.child(task.id))
    for task in tasks:
        if task.subtasks:
            fixed.extend(normalize_positions(task.subtasks, base.child(task.id)))
    return fixed

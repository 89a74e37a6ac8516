"""Tests for the priority bucket manager."""

import random

import pytest

from deepfocus.domain.shared import Err, Ok
from deepfocus.domain.task import (
    Priority,
    TaskMoved,
    move_with_priority_change,
    normalize_positions,
    toggle_defer,
    toggle_prefer,
    visual_order,
)
from deepfocus.domain.types import TaskPath
from tests.helpers import assert_dense, by_id, single_project, slot, task

ROOT = TaskPath.project("project1")


def path(*ids: str) -> TaskPath:
    return TaskPath(segments=("project1", *ids))


def ids(tasks) -> list[str]:
    return [t.id for t in tasks]


def normal_and_deferred(normal: int, deferred: int):
    tasks = [task(f"n{i}", 0, i) for i in range(normal)]
    tasks += [task(f"d{i}", -1, i) for i in range(deferred)]
    return single_project(tasks)


class TestMoveAcrossTiers:
    """Moves that change a task's tier."""

    def test_normal_to_deferred(self):
        """n1 dragged below the Normal tier lands at the front of Deferred."""
        ws = normal_and_deferred(3, 2)
        tasks = ws.projects[0].tasks

        result = move_with_priority_change(ws, path("n1"), 1, 3, Priority.DEFERRED)

        assert isinstance(result, Ok)
        assert slot(by_id(tasks, "n0")) == (0, 0)
        assert slot(by_id(tasks, "n2")) == (0, 1)
        assert slot(by_id(tasks, "n1")) == (-1, 0)
        assert slot(by_id(tasks, "d0")) == (-1, 1)
        assert slot(by_id(tasks, "d1")) == (-1, 2)
        assert ids(visual_order(tasks)) == ["n0", "n2", "n1", "d0", "d1"]
        assert result.value.changed == (path("n1"), path("n2"), path("d0"), path("d1"))
        assert_dense(tasks)

    def test_deferred_to_normal(self):
        """d1 dragged into the Normal tier shifts the Normal tasks behind it."""
        ws = normal_and_deferred(2, 3)
        tasks = ws.projects[0].tasks

        result = move_with_priority_change(ws, path("d1"), 3, 1, Priority.NORMAL)

        assert isinstance(result, Ok)
        assert slot(by_id(tasks, "d1")) == (0, 1)
        assert slot(by_id(tasks, "n1")) == (0, 2)
        assert slot(by_id(tasks, "d0")) == (-1, 0)
        assert slot(by_id(tasks, "d2")) == (-1, 1)
        assert ids(visual_order(tasks)) == ["n0", "d1", "n1", "d0", "d2"]
        assert set(result.value.changed) == {path("d1"), path("n1"), path("d2")}
        assert_dense(tasks)

    def test_drop_between_deferred_tasks(self):
        """Dropping at visual index 3 of a 2+2 layout lands between d0 and d1."""
        ws = normal_and_deferred(2, 2)
        tasks = ws.projects[0].tasks

        move_with_priority_change(ws, path("n1"), 1, 3, Priority.DEFERRED)

        assert slot(by_id(tasks, "n1")) == (-1, 1)
        assert by_id(tasks, "d0").position == 0
        assert by_id(tasks, "d1").position == 2
        assert_dense(tasks)

    def test_drop_at_tier_boundary(self):
        """Dropping at the first Deferred index lands at Deferred position 0."""
        ws = normal_and_deferred(2, 2)
        tasks = ws.projects[0].tasks

        move_with_priority_change(ws, path("n1"), 1, 2, Priority.DEFERRED)

        assert slot(by_id(tasks, "n1")) == (-1, 0)
        assert by_id(tasks, "d0").position == 1
        assert by_id(tasks, "d1").position == 2
        assert_dense(tasks)

    def test_into_empty_preferred_tier(self):
        """The first Preferred task gets position 0."""
        ws = normal_and_deferred(3, 0)
        tasks = ws.projects[0].tasks

        move_with_priority_change(ws, path("n2"), 2, 0, Priority.PREFERRED)

        assert slot(by_id(tasks, "n2")) == (1, 0)
        assert ids(visual_order(tasks)) == ["n2", "n0", "n1"]
        assert_dense(tasks)

    def test_event_records_old_and_new_slot(self):
        """The TaskMoved event carries both slots."""
        ws = normal_and_deferred(3, 2)

        result = move_with_priority_change(ws, path("n1"), 1, 3, Priority.DEFERRED)

        (event,) = result.value.events
        assert isinstance(event, TaskMoved)
        assert event.task_path == "project1/n1"
        assert (event.old_priority, event.old_position) == (0, 1)
        assert (event.new_priority, event.new_position) == (-1, 0)


class TestMoveWithinTier:
    """Reorders that keep the task's tier."""

    def test_move_down_one(self):
        """b moves below c; only b and c change."""
        ws = single_project([task("a", 0, 0), task("b", 0, 1), task("c", 0, 2), task("d", 0, 3)])
        tasks = ws.projects[0].tasks

        result = move_with_priority_change(ws, path("b"), 1, 2, Priority.NORMAL)

        assert ids(visual_order(tasks)) == ["a", "c", "b", "d"]
        assert result.value.changed == (path("b"), path("c"))
        assert_dense(tasks)

    def test_move_first_to_last(self):
        """The first task goes to the end of its tier."""
        ws = single_project([task("a", 0, 0), task("b", 0, 1), task("c", 0, 2)])
        tasks = ws.projects[0].tasks

        move_with_priority_change(ws, path("a"), 0, 2, Priority.NORMAL)

        assert [slot(by_id(tasks, i)) for i in ("b", "c", "a")] == [(0, 0), (0, 1), (0, 2)]

    def test_repeating_a_move_changes_nothing_else(self):
        """Applying the same move again only reports the moved task."""
        ws = single_project([task("a", 0, 0), task("b", 0, 1), task("c", 0, 2)])
        tasks = ws.projects[0].tasks
        move_with_priority_change(ws, path("a"), 0, 2, Priority.NORMAL)
        snapshot = [slot(t) for t in tasks]

        result = move_with_priority_change(ws, path("a"), 2, 2, Priority.NORMAL)

        assert [slot(t) for t in tasks] == snapshot
        assert result.value.changed == (path("a"),)


class TestMoveClamping:
    """Out-of-range visual indices are clamped into the destination tier."""

    def test_index_past_the_end(self):
        """A huge index appends to the destination tier."""
        ws = normal_and_deferred(2, 2)
        tasks = ws.projects[0].tasks

        move_with_priority_change(ws, path("n0"), 0, 99, Priority.DEFERRED)

        assert slot(by_id(tasks, "n0")) == (-1, 2)
        assert_dense(tasks)

    def test_index_before_the_tier(self):
        """An index above the destination tier lands at its front."""
        ws = normal_and_deferred(3, 2)
        tasks = ws.projects[0].tasks

        move_with_priority_change(ws, path("n0"), 0, 0, Priority.DEFERRED)

        assert slot(by_id(tasks, "n0")) == (-1, 0)
        assert_dense(tasks)

    def test_negative_index(self):
        """A negative index clamps to 0."""
        ws = normal_and_deferred(3, 0)
        tasks = ws.projects[0].tasks

        move_with_priority_change(ws, path("n2"), 2, -5, Priority.NORMAL)

        assert ids(visual_order(tasks)) == ["n2", "n0", "n1"]


class TestMoveErrors:
    """Rejected moves leave the tree untouched."""

    def _snapshot(self, tasks):
        return [(t.id, slot(t)) for t in tasks]

    def test_missing_task(self):
        """A stale path is an error."""
        ws = normal_and_deferred(2, 1)
        before = self._snapshot(ws.projects[0].tasks)

        result = move_with_priority_change(ws, path("ghost"), 0, 1, Priority.NORMAL)

        assert isinstance(result, Err)
        assert "not found" in result.error
        assert self._snapshot(ws.projects[0].tasks) == before

    def test_invalid_priority(self):
        """A tier outside -1..1 is an error."""
        ws = normal_and_deferred(2, 1)
        before = self._snapshot(ws.projects[0].tasks)

        result = move_with_priority_change(ws, path("n0"), 0, 1, 2)

        assert isinstance(result, Err)
        assert "priority" in result.error
        assert self._snapshot(ws.projects[0].tasks) == before

    def test_completed_task(self):
        """Completed tasks have no slot to move."""
        ws = single_project([task("a", 0, 0), task("done", 0, 0, completed=True)])

        result = move_with_priority_change(ws, path("done"), 1, 0, Priority.NORMAL)

        assert isinstance(result, Err)

    def test_project_path(self):
        """A project root cannot be moved."""
        ws = normal_and_deferred(1, 0)

        assert isinstance(move_with_priority_change(ws, ROOT, 0, 0, Priority.NORMAL), Err)


class TestTogglePrefer:
    """Preferring and un-preferring."""

    def test_prefer_appends_to_preferred_tier(self):
        """b joins Preferred and c closes b's gap in Normal."""
        ws = single_project([task("a", 0, 0), task("b", 0, 1), task("c", 0, 2)])
        tasks = ws.projects[0].tasks

        result = toggle_prefer(ws, path("b"))

        assert slot(by_id(tasks, "b")) == (1, 0)
        assert slot(by_id(tasks, "c")) == (0, 1)
        assert result.value.changed == (path("b"), path("c"))
        assert_dense(tasks)

    def test_prefer_goes_behind_existing_preferred(self):
        """A second Preferred task follows the first one."""
        ws = single_project([task("p", 1, 0), task("a", 0, 0)])

        toggle_prefer(ws, path("a"))

        assert slot(by_id(ws.projects[0].tasks, "a")) == (1, 1)

    def test_unprefer_goes_to_front_of_normal(self):
        """Un-preferring puts the task first in Normal and shifts Normal down."""
        ws = single_project([task("p0", 1, 0), task("p1", 1, 1), task("a", 0, 0), task("b", 0, 1)])
        tasks = ws.projects[0].tasks

        result = toggle_prefer(ws, path("p0"))

        assert slot(by_id(tasks, "p0")) == (0, 0)
        assert slot(by_id(tasks, "p1")) == (1, 0)
        assert slot(by_id(tasks, "a")) == (0, 1)
        assert slot(by_id(tasks, "b")) == (0, 2)
        assert set(result.value.changed) == {path("p0"), path("p1"), path("a"), path("b")}
        assert_dense(tasks)

    def test_toggle_twice(self):
        """Prefer then un-prefer lands the task first in Normal."""
        ws = single_project([task("a", 0, 0), task("b", 0, 1), task("c", 0, 2)])
        tasks = ws.projects[0].tasks

        toggle_prefer(ws, path("b"))
        toggle_prefer(ws, path("b"))

        assert ids(visual_order(tasks)) == ["b", "a", "c"]
        assert_dense(tasks)

    def test_prefer_deferred_task(self):
        """A Deferred task can be preferred directly."""
        ws = single_project([task("a", 0, 0), task("d0", -1, 0), task("d1", -1, 1)])
        tasks = ws.projects[0].tasks

        toggle_prefer(ws, path("d0"))

        assert slot(by_id(tasks, "d0")) == (1, 0)
        assert slot(by_id(tasks, "d1")) == (-1, 0)

    def test_missing_task(self):
        """A stale path is an error."""
        ws = single_project([task("a")])

        assert isinstance(toggle_prefer(ws, path("ghost")), Err)


class TestToggleDefer:
    """Deferring and un-deferring."""

    def test_defer_appends_to_deferred_tier(self):
        """The deferred task goes behind existing Deferred tasks."""
        ws = single_project([task("a", 0, 0), task("b", 0, 1), task("d", -1, 0)])
        tasks = ws.projects[0].tasks

        toggle_defer(ws, path("a"))

        assert slot(by_id(tasks, "a")) == (-1, 1)
        assert slot(by_id(tasks, "b")) == (0, 0)
        assert ids(visual_order(tasks)) == ["b", "d", "a"]

    def test_undefer_goes_to_front_of_normal(self):
        """Un-deferring mirrors un-preferring."""
        ws = single_project([task("a", 0, 0), task("d0", -1, 0), task("d1", -1, 1)])
        tasks = ws.projects[0].tasks

        toggle_defer(ws, path("d1"))

        assert slot(by_id(tasks, "d1")) == (0, 0)
        assert slot(by_id(tasks, "a")) == (0, 1)
        assert slot(by_id(tasks, "d0")) == (-1, 0)
        assert_dense(tasks)

    def test_defer_completed_task(self):
        """A completed task cannot be deferred."""
        ws = single_project([task("done", completed=True)])

        assert isinstance(toggle_defer(ws, path("done")), Err)

    def test_nested_siblings(self):
        """Toggles work inside subtask lists too."""
        ws = single_project([task("parent", 0, 0, [task("x", 0, 0), task("y", 0, 1)])])
        subtasks = ws.projects[0].tasks[0].subtasks

        result = toggle_defer(ws, path("parent", "x"))

        assert slot(by_id(subtasks, "x")) == (-1, 0)
        assert slot(by_id(subtasks, "y")) == (0, 0)
        assert result.value.changed == (path("parent", "x"), path("parent", "y"))


class TestCompletedSiblingsIgnored:
    """Completed siblings hold no slot and are never shifted."""

    def test_completed_sibling_untouched_by_move(self):
        """A completed Normal sibling keeps its stale position."""
        ws = single_project([task("a", 0, 0), task("b", 0, 1), task("done", 0, 5, completed=True)])
        tasks = ws.projects[0].tasks

        result = move_with_priority_change(ws, path("a"), 0, 1, Priority.NORMAL)

        assert by_id(tasks, "done").position == 5
        assert path("done") not in result.value.changed


class TestDensityUnderRandomOperations:
    """Random sequences of bucket operations keep every tier dense."""

    @pytest.mark.parametrize("seed", range(10))
    def test_random_sequence(self, seed):
        """Positions stay 0..n-1 per tier after each operation."""
        rng = random.Random(seed)
        ws = single_project([task(f"t{i}", 0, i) for i in range(7)])
        tasks = ws.projects[0].tasks

        for _ in range(40):
            target = rng.choice(tasks)
            operation = rng.randrange(3)
            if operation == 0:
                order = visual_order(tasks)
                old_index = order.index(target)
                new_index = rng.randrange(-1, len(order) + 1)
                result = move_with_priority_change(
                    ws, path(target.id), old_index, new_index, rng.choice([1, 0, -1])
                )
            elif operation == 1:
                result = toggle_prefer(ws, path(target.id))
            else:
                result = toggle_defer(ws, path(target.id))

            assert isinstance(result, Ok)
            assert_dense(tasks)


class TestNormalizePositions:
    """Repairing duplicate and sparse positions."""

    def test_fills_gaps_and_duplicates(self):
        """Positions are renumbered densely in stored order."""
        ws = single_project(
            [task("a", 0, 3), task("b", 0, 3), task("c", 0, 9), task("p", 1, 4)]
        )
        tasks = ws.projects[0].tasks
        by_id(tasks, "b").last_modified = by_id(tasks, "a").last_modified.replace(year=2000)

        fixed = normalize_positions(tasks, ROOT)

        assert ids(visual_order(tasks)) == ["p", "b", "a", "c"]
        assert set(fixed) == {path("p"), path("a"), path("b"), path("c")}
        assert_dense(tasks)

    def test_recurses_into_subtasks(self):
        """Nested sibling groups are repaired too."""
        ws = single_project([task("parent", 0, 0, [task("x", 0, 2), task("y", -1, 7)])])

        fixed = normalize_positions(ws.projects[0].tasks, ROOT)

        assert fixed == [path("parent", "x"), path("parent", "y")]
        assert_dense(ws.projects[0].tasks)

    def test_dense_tree_is_unchanged(self):
        """Nothing is reported for an already dense tree."""
        ws = normal_and_deferred(3, 2)

        assert normalize_positions(ws.projects[0].tasks, ROOT) == []

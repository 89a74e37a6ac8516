"""Task management CLI commands.

Commands for editing the tree: adding, renaming, completing, deleting,
reordering and re-parenting tasks, plus read-only views of projects and
their focusable leaves.
"""

from pathlib import Path
from typing import Optional

import typer

from deepfocus.application import (
    add_task,
    delete_task,
    move_to_parent,
    rename_task,
    toggle_completion,
    workspace_stats,
)
from deepfocus.domain.task import (
    count_subtasks,
    find_project,
    find_task,
    leaves_under,
    move_with_priority_change,
    siblings_of,
    toggle_defer,
    toggle_prefer,
    visual_order,
)
from deepfocus.interfaces.cli.common import (
    build_tree,
    console,
    get_repository,
    load_workspace,
    parse_path,
    parse_tier,
    print_changes,
    print_error,
    print_info,
    print_separator,
    print_success,
    print_warning,
    save_workspace,
    unwrap,
    workspace_option,
)

app = typer.Typer(help="Task management commands")


# =============================================================================
# Commands
# =============================================================================


@app.command("add")
def add(
    parent: str = typer.Argument(..., help="Project or task to add under, e.g. inbox/task-1"),
    name: str = typer.Argument(..., help="Name of the new task"),
    workspace: Optional[Path] = workspace_option(),
) -> None:
    """Add a task at the end of the parent's normal tier."""
    repo = get_repository(workspace)
    ws = load_workspace(repo)

    task, changes = unwrap(add_task(ws, parse_path(parent), name))
    save_workspace(repo, ws)
    print_success(f"Added '{task.name}' as {changes.changed[0]}")


@app.command("rename")
def rename(
    path: str = typer.Argument(..., help="Task path"),
    name: str = typer.Argument(..., help="New name"),
    workspace: Optional[Path] = workspace_option(),
) -> None:
    """Rename a task."""
    repo = get_repository(workspace)
    ws = load_workspace(repo)

    unwrap(rename_task(ws, parse_path(path), name))
    save_workspace(repo, ws)
    print_success(f"Renamed {path}")


@app.command("done")
def done(
    path: str = typer.Argument(..., help="Task path"),
    workspace: Optional[Path] = workspace_option(),
) -> None:
    """Toggle completion of a task.

    Completing a task completes all of its subtasks too.
    """
    repo = get_repository(workspace)
    ws = load_workspace(repo)
    task_path = parse_path(path)

    task = find_task(ws, task_path)
    if task is not None and not task.completed:
        open_subtasks = len(task.incomplete_subtasks())
        if open_subtasks:
            print_warning(
                f"'{task.name}' still has {open_subtasks} open subtasks "
                f"({count_subtasks(task)} in total); completing them as well"
            )

    changes = unwrap(toggle_completion(ws, task_path))
    save_workspace(repo, ws)
    task = find_task(ws, task_path)
    print_success(f"{'Completed' if task.completed else 'Reopened'} '{task.name}'")
    print_changes(changes)


@app.command("prefer")
def prefer(
    path: str = typer.Argument(..., help="Task path"),
    workspace: Optional[Path] = workspace_option(),
) -> None:
    """Toggle the preferred tier of a task."""
    repo = get_repository(workspace)
    ws = load_workspace(repo)

    changes = unwrap(toggle_prefer(ws, parse_path(path)))
    save_workspace(repo, ws)
    print_success(f"Updated priority of {path}")
    print_changes(changes)


@app.command("defer")
def defer(
    path: str = typer.Argument(..., help="Task path"),
    workspace: Optional[Path] = workspace_option(),
) -> None:
    """Toggle the deferred tier of a task."""
    repo = get_repository(workspace)
    ws = load_workspace(repo)

    changes = unwrap(toggle_defer(ws, parse_path(path)))
    save_workspace(repo, ws)
    print_success(f"Updated priority of {path}")
    print_changes(changes)


@app.command("move")
def move(
    path: str = typer.Argument(..., help="Task path"),
    index: int = typer.Argument(..., help="Target index in the displayed sibling order"),
    tier: Optional[str] = typer.Option(
        None, "--tier", "-t", help="Destination tier: preferred, normal or deferred"
    ),
    workspace: Optional[Path] = workspace_option(),
) -> None:
    """Move a task to another index among its siblings, optionally changing tier."""
    repo = get_repository(workspace)
    ws = load_workspace(repo)
    task_path = parse_path(path)

    task = find_task(ws, task_path)
    siblings = siblings_of(ws, task_path)
    if task is None or siblings is None:
        print_error(f"Task not found at path: {task_path}")
        raise typer.Exit(1)

    order = visual_order(siblings)
    old_index = next((i for i, t in enumerate(order) if t is task), 0)
    destination = parse_tier(tier) if tier else task.priority

    changes = unwrap(move_with_priority_change(ws, task_path, old_index, index, destination))
    save_workspace(repo, ws)
    print_success(f"Moved '{task.name}' to {destination.name.lower()} #{task.position}")
    print_changes(changes)


@app.command("reparent")
def reparent(
    path: str = typer.Argument(..., help="Task path"),
    parent: str = typer.Argument(..., help="New parent (project or task path)"),
    workspace: Optional[Path] = workspace_option(),
) -> None:
    """Move a task with its subtasks under another parent."""
    repo = get_repository(workspace)
    ws = load_workspace(repo)

    new_path, changes = unwrap(move_to_parent(ws, parse_path(path), parse_path(parent)))
    save_workspace(repo, ws)
    print_success(f"Moved to {new_path}")
    print_changes(changes)


@app.command("delete")
def delete(
    path: str = typer.Argument(..., help="Task path"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    workspace: Optional[Path] = workspace_option(),
) -> None:
    """Delete a task and all of its subtasks."""
    repo = get_repository(workspace)
    ws = load_workspace(repo)
    task_path = parse_path(path)

    task = find_task(ws, task_path)
    if task is None:
        print_error(f"Task not found at path: {task_path}")
        raise typer.Exit(1)

    nested = count_subtasks(task)
    if not yes and not typer.confirm(f"Delete '{task.name}' and {nested} subtasks?"):
        raise typer.Abort()

    changes = unwrap(delete_task(ws, task_path))
    save_workspace(repo, ws)
    print_success(f"Deleted '{task.name}'")
    print_changes(changes)


@app.command("tree")
def tree(
    project: Optional[str] = typer.Argument(None, help="Project id (all projects if omitted)"),
    show_completed: bool = typer.Option(False, "--all", "-a", help="Include completed tasks"),
    workspace: Optional[Path] = workspace_option(),
) -> None:
    """Show projects as trees in display order."""
    ws = load_workspace(get_repository(workspace))

    projects = ws.projects
    if project is not None:
        found = find_project(ws, project)
        if found is None:
            print_error(f"Project not found: {project}")
            raise typer.Exit(1)
        projects = [found]

    for item in projects:
        console.print(build_tree(item, show_completed))


@app.command("leaves")
def leaves(
    path: str = typer.Argument(..., help="Project or task path"),
    workspace: Optional[Path] = workspace_option(),
) -> None:
    """List the focusable leaf tasks below a path."""
    ws = load_workspace(get_repository(workspace))

    found = leaves_under(ws, parse_path(path))
    if not found:
        print_info("Nothing to focus on here.")
        return
    for task in found:
        typer.echo(f"- {task.name} ({task.id})")


@app.command("stats")
def stats(
    project: Optional[str] = typer.Argument(None, help="Project id (whole workspace if omitted)"),
    workspace: Optional[Path] = workspace_option(),
) -> None:
    """Show completion statistics."""
    ws = load_workspace(get_repository(workspace))
    if project is not None and find_project(ws, project) is None:
        print_error(f"Project not found: {project}")
        raise typer.Exit(1)

    result = workspace_stats(ws, project)
    print_separator()
    typer.echo(f"Tasks:     {result.total}")
    typer.echo(f"Completed: {result.completed} ({result.progress_percent}%)")
    typer.echo(f"Open:      {result.open}")
    typer.echo(f"Leaves:    {result.leaves}")
    print_separator()

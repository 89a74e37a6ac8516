"""Shared utilities for deepfocus CLI commands.

This module provides common utilities used across CLI commands:
- Workspace resolution, loading and saving
- Path and tier argument parsing
- Formatted output helpers (error, success, info)
- Task and change-set formatting for display
"""

import random
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.tree import Tree as RichTree

from deepfocus.config import get_config, workspace_file
from deepfocus.domain.shared import Err, Ok, Result
from deepfocus.domain.task import ChangeSet, Priority, Project, Task, Workspace, visual_order
from deepfocus.domain.types import TaskPath
from deepfocus.infrastructure.storage import WorkspaceRepository

console = Console()


def workspace_option() -> Any:
    """Reusable --workspace option for CLI commands.

    Usage: def my_command(workspace: Optional[Path] = workspace_option()) -> None:
    """
    return typer.Option(
        None,
        "--workspace",
        "-w",
        help="Workspace file (or set DEEPFOCUS_WORKSPACE env var)",
        envvar="DEEPFOCUS_WORKSPACE",
    )


TIER_NAMES = {
    "preferred": Priority.PREFERRED,
    "normal": Priority.NORMAL,
    "deferred": Priority.DEFERRED,
}

TIER_MARKS = {
    Priority.PREFERRED: "[green]↑[/green]",
    Priority.NORMAL: " ",
    Priority.DEFERRED: "[dim]↓[/dim]",
}


# =============================================================================
# Output
# =============================================================================


def print_error(msg: str) -> None:
    """Print a formatted error message.

    Args:
        msg: Error message to display
    """
    typer.echo(typer.style(f"Error: {msg}", fg=typer.colors.RED), err=True)


def print_success(msg: str) -> None:
    """Print a formatted success message.

    Args:
        msg: Success message to display
    """
    typer.echo(typer.style(msg, fg=typer.colors.GREEN))


def print_info(msg: str) -> None:
    """Print a formatted info message."""
    typer.echo(typer.style(msg, fg=typer.colors.BLUE))


def print_warning(msg: str) -> None:
    """Print a formatted warning message."""
    typer.echo(typer.style(f"Warning: {msg}", fg=typer.colors.YELLOW), err=True)


def print_separator(char: str = "=", width: int = 60) -> None:
    """Print a separator line.

    Args:
        char: Character to use for separator
        width: Width of the separator line
    """
    typer.echo(char * width)


def print_changes(changes: ChangeSet) -> None:
    """List the task paths a mutation touched."""
    for path in changes.changed:
        typer.echo(f"  ~ {path}")


def format_focus_task(task: Task, path: TaskPath | None) -> str:
    """Format the task in focus, matching the separator style of the CLI."""
    lines = ["=" * 60, "FOCUS", "=" * 60, f"\n  {task.name}\n"]
    if path is not None:
        lines.append(f"  path: {path}")
    if task.priority != Priority.NORMAL:
        lines.append(f"  priority: {task.priority.name.lower()}")
    lines.append("=" * 60)
    return "\n".join(lines)


def build_tree(project: Project, show_completed: bool = False) -> RichTree:
    """Render a project as a rich tree in visual order."""
    root = RichTree(f"[bold]{project.name}[/bold] [dim]({project.id})[/dim]")

    def add_level(branch: RichTree, tasks: list[Task]) -> None:
        shown = visual_order(tasks)
        if show_completed:
            shown += sorted(
                (t for t in tasks if t.completed),
                key=lambda t: t.completion_date or t.last_modified,
            )
        for task in shown:
            box = "[x]" if task.completed else "[ ]"
            label = f"{TIER_MARKS[task.priority]} {box} {task.name} [dim]{task.id}[/dim]"
            add_level(branch.add(label), task.subtasks)

    add_level(root, project.tasks)
    return root


# =============================================================================
# Arguments
# =============================================================================


def parse_path(raw: str) -> TaskPath:
    """Parse a slash-separated path argument, exiting on an empty one."""
    path = TaskPath.from_string(raw)
    if not path:
        print_error("Path must name a project or task, e.g. 'inbox' or 'inbox/task-1'")
        raise typer.Exit(1)
    return path


def parse_tier(raw: str) -> Priority:
    """Parse a tier name (preferred, normal, deferred)."""
    tier = TIER_NAMES.get(raw.strip().lower())
    if tier is None:
        print_error(f"Unknown tier '{raw}', use one of: {', '.join(TIER_NAMES)}")
        raise typer.Exit(1)
    return tier


def make_rng(seed: int | None) -> random.Random:
    """Random source for focus picks, seeded from option or config."""
    if seed is None:
        seed = get_config().seed
    return random.Random(seed)


# =============================================================================
# Workspace access
# =============================================================================


def get_repository(explicit: Path | None = None) -> WorkspaceRepository:
    """Resolve the workspace file.

    Resolution order:
    1. Explicit --workspace option (or DEEPFOCUS_WORKSPACE env var)
    2. ``workspace_path`` from the config file
    3. ``workspace.json`` in the config directory
    """
    if explicit is not None:
        return WorkspaceRepository(explicit)
    return WorkspaceRepository(workspace_file(get_config()))


def load_workspace(repo: WorkspaceRepository) -> Workspace:
    """Load the workspace or exit with a helpful error."""
    if not repo.exists():
        print_error(f"No workspace at {repo.path}")
        typer.echo("Create one with: deepfocus init --project Inbox")
        raise typer.Exit(1)

    result = repo.load()
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)
    return result.value


def save_workspace(repo: WorkspaceRepository, workspace: Workspace) -> None:
    """Persist the workspace or exit with an error."""
    result = repo.save(workspace)
    if isinstance(result, Err):
        print_error(result.error)
        raise typer.Exit(1)


def unwrap(result: Result) -> object:
    """Return the Ok value, or print the error and exit."""
    if isinstance(result, Ok):
        return result.value
    print_error(result.error)
    raise typer.Exit(1)

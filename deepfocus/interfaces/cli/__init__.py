"""CLI interface for deepfocus using Typer.

Usage:
    deepfocus init --project Inbox   # Create a workspace
    deepfocus task add inbox "Write report"
    deepfocus focus start inbox      # Show one task to work on
    deepfocus focus done             # Complete it and get the next one

The CLI is structured as:
- app: Main Typer application
- commands/: Command groups (task, focus)
- common.py: Shared utilities for CLI commands
- main.py: Entry point that runs the app
"""

import logging
from pathlib import Path
from typing import Optional

import typer

from deepfocus import __version__
from deepfocus.config import get_config
from deepfocus.interfaces.cli.commands import focus, task
from deepfocus.interfaces.cli.common import (
    get_repository,
    print_error,
    print_success,
    unwrap,
    workspace_option,
)

app = typer.Typer(
    name="deepfocus",
    help="Hierarchical task manager with a one-task-at-a-time focus mode",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"deepfocus version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """deepfocus - break work down, then face one task at a time."""
    level = "DEBUG" if verbose else get_config().log_level.upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# =============================================================================
# Register Command Groups
# =============================================================================

app.add_typer(task.app, name="task")
app.add_typer(focus.app, name="focus")


# =============================================================================
# Top-Level Commands
# =============================================================================


@app.command("init")
def init(
    projects: list[str] = typer.Option(
        ["Inbox"], "--project", "-p", help="Project to create (repeatable)"
    ),
    workspace: Optional[Path] = workspace_option(),
) -> None:
    """Create a new workspace file."""
    repo = get_repository(workspace)
    if repo.exists():
        print_error(f"Workspace already exists: {repo.path}")
        raise typer.Exit(1)

    ws = unwrap(repo.create(projects))
    print_success(f"Created workspace at {repo.path}")
    for project in ws.projects:
        typer.echo(f"  - {project.name} ({project.id})")


@app.command("next")
def next_task(
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for tie-breaks"),
    workspace: Optional[Path] = workspace_option(),
) -> None:
    """Skip to a different focus task (shortcut for 'focus next')."""
    focus.next_task(seed=seed, workspace=workspace)


@app.command("done")
def done(
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for tie-breaks"),
    workspace: Optional[Path] = workspace_option(),
) -> None:
    """Complete the focus task (shortcut for 'focus done')."""
    focus.done(seed=seed, workspace=workspace)


__all__ = ["app"]

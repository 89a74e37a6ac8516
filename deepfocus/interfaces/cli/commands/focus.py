"""Focus mode CLI commands.

A focus session survives between invocations as a pointer (the session
root and the id of the task in focus) stored next to the config. Every
command resumes the session, acts, saves the workspace and the pointer.
"""

from pathlib import Path
from typing import Optional

import typer

from deepfocus.application import FocusScheduler
from deepfocus.config import (
    FocusPointer,
    clear_focus_pointer,
    get_focus_pointer,
    save_focus_pointer,
)
from deepfocus.domain.focus import FocusState
from deepfocus.domain.task import Workspace
from deepfocus.infrastructure.storage import WorkspaceRepository
from deepfocus.interfaces.cli.common import (
    format_focus_task,
    get_repository,
    load_workspace,
    make_rng,
    parse_path,
    print_changes,
    print_error,
    print_info,
    print_success,
    save_workspace,
    unwrap,
    workspace_option,
)

app = typer.Typer(help="Focus mode: one task at a time")


# =============================================================================
# Session helpers
# =============================================================================


def _resume(ws: Workspace, seed: int | None) -> FocusScheduler:
    """Resume the remembered session or exit if there is none."""
    pointer = get_focus_pointer()
    if pointer is None:
        print_error("No focus session. Start one with: deepfocus focus start <project>")
        raise typer.Exit(1)

    scheduler = FocusScheduler(ws, rng=make_rng(seed))
    unwrap(scheduler.resume(parse_path(pointer.start_path), pointer.current_id))
    return scheduler


def _persist(repo: WorkspaceRepository, scheduler: FocusScheduler) -> None:
    save_workspace(repo, scheduler.workspace)
    if scheduler.state in (FocusState.IDLE, FocusState.EXHAUSTED) or scheduler.start_path is None:
        clear_focus_pointer()
        return
    save_focus_pointer(
        FocusPointer(
            start_path=str(scheduler.start_path),
            current_id=scheduler.current.id if scheduler.current else None,
        )
    )


def _show(scheduler: FocusScheduler) -> None:
    """Print the task in focus or the state that replaced it."""
    if scheduler.state == FocusState.EXHAUSTED:
        print_success("Everything is done. Focus session ended.")
    elif scheduler.current is None:
        print_success(f"All tasks under {scheduler.start_path} are complete!")
        typer.echo("Run 'deepfocus focus keep-going' to move on.")
    else:
        typer.echo(format_focus_task(scheduler.current, scheduler.current_path()))


# =============================================================================
# Commands
# =============================================================================


@app.command("start")
def start(
    path: str = typer.Argument(..., help="Project or task to focus on"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for tie-breaks"),
    workspace: Optional[Path] = workspace_option(),
) -> None:
    """Start a focus session rooted at a project or task."""
    repo = get_repository(workspace)
    ws = load_workspace(repo)

    scheduler = FocusScheduler(ws, rng=make_rng(seed))
    unwrap(scheduler.start(parse_path(path)))
    _persist(repo, scheduler)
    _show(scheduler)


@app.command("show")
def show(
    workspace: Optional[Path] = workspace_option(),
) -> None:
    """Show the task in focus."""
    ws = load_workspace(get_repository(workspace))
    _show(_resume(ws, None))


@app.command("next")
def next_task(
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for tie-breaks"),
    workspace: Optional[Path] = workspace_option(),
) -> None:
    """Skip to a different task."""
    repo = get_repository(workspace)
    scheduler = _resume(load_workspace(repo), seed)

    unwrap(scheduler.get_next())
    _persist(repo, scheduler)
    _show(scheduler)


@app.command("done")
def done(
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for tie-breaks"),
    workspace: Optional[Path] = workspace_option(),
) -> None:
    """Complete the task in focus and move to the next one."""
    repo = get_repository(workspace)
    scheduler = _resume(load_workspace(repo), seed)

    finished = scheduler.current
    changes = unwrap(scheduler.complete())
    print_success(f"Completed '{finished.name}'")
    print_changes(changes)

    unwrap(scheduler.get_next())
    _persist(repo, scheduler)
    _show(scheduler)


@app.command("keep-going")
def keep_going(
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for tie-breaks"),
    workspace: Optional[Path] = workspace_option(),
) -> None:
    """Leave a finished scope and continue one level up or in another project."""
    repo = get_repository(workspace)
    scheduler = _resume(load_workspace(repo), seed)

    unwrap(scheduler.keep_going())
    _persist(repo, scheduler)
    _show(scheduler)


@app.command("prefer")
def prefer(
    workspace: Optional[Path] = workspace_option(),
) -> None:
    """Toggle the preferred tier of the task in focus."""
    repo = get_repository(workspace)
    scheduler = _resume(load_workspace(repo), None)

    print_changes(unwrap(scheduler.prefer()))
    _persist(repo, scheduler)
    print_info("Priority updated.")


@app.command("defer")
def defer(
    workspace: Optional[Path] = workspace_option(),
) -> None:
    """Toggle the deferred tier of the task in focus."""
    repo = get_repository(workspace)
    scheduler = _resume(load_workspace(repo), None)

    print_changes(unwrap(scheduler.defer()))
    _persist(repo, scheduler)
    print_info("Priority updated.")


@app.command("split")
def split(
    names: list[str] = typer.Argument(..., help="Names of the new subtasks"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for tie-breaks"),
    workspace: Optional[Path] = workspace_option(),
) -> None:
    """Break the task in focus into subtasks and focus on them."""
    repo = get_repository(workspace)
    scheduler = _resume(load_workspace(repo), seed)

    print_changes(unwrap(scheduler.break_down(names)))
    _persist(repo, scheduler)
    _show(scheduler)


@app.command("end")
def end() -> None:
    """End the focus session."""
    clear_focus_pointer()
    print_info("Focus session ended.")

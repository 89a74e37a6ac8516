"""CLI command groups for deepfocus.

Each module provides a Typer app registered with the main app using
app.add_typer():

- task: Tree editing and views (add, done, prefer, move, tree, ...)
- focus: Focus sessions (start, next, done, keep-going, ...)
"""

from deepfocus.interfaces.cli.commands import focus, task

__all__ = ["task", "focus"]

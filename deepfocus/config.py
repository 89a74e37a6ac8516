"""Global configuration storage for deepfocus.

Stores user preferences in ~/.deepfocus/config.json (or under the
directory named by DEEPFOCUS_HOME).
"""

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


class FocusConfig(BaseModel):
    """User configuration."""

    workspace_path: str | None = None  # Defaults to <config dir>/workspace.json
    seed: int | None = None  # Fixes the tie-break random source
    log_level: str = "WARNING"


def get_config_dir() -> Path:
    """Get the deepfocus config directory, creating it if needed."""
    override = os.environ.get("DEEPFOCUS_HOME")
    config_dir = Path(override) if override else Path.home() / ".deepfocus"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config() -> FocusConfig:
    """Load the configuration, falling back to defaults."""
    config_file = get_config_dir() / "config.json"
    if config_file.exists():
        try:
            data = json.loads(config_file.read_text(encoding="utf-8"))
            return FocusConfig(**data)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable config {config_file}: {e}")
    return FocusConfig()


def save_config(config: FocusConfig) -> None:
    """Save the configuration."""
    config_file = get_config_dir() / "config.json"
    config_file.write_text(
        json.dumps(config.model_dump(), indent=2),
        encoding="utf-8",
    )


def workspace_file(config: FocusConfig) -> Path:
    """Resolve the workspace file a config points at."""
    if config.workspace_path:
        return Path(config.workspace_path).expanduser()
    return get_config_dir() / "workspace.json"


class FocusPointer(BaseModel):
    """Where the last command-line focus session stands."""

    start_path: str
    current_id: str | None = None


def get_focus_pointer() -> FocusPointer | None:
    """Load the remembered focus session, if any."""
    state_file = get_config_dir() / "focus.json"
    if state_file.exists():
        try:
            data = json.loads(state_file.read_text(encoding="utf-8"))
            return FocusPointer(**data)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable focus state {state_file}: {e}")
    return None


def save_focus_pointer(pointer: FocusPointer) -> None:
    """Remember the current focus session."""
    state_file = get_config_dir() / "focus.json"
    state_file.write_text(json.dumps(pointer.model_dump(), indent=2), encoding="utf-8")


def clear_focus_pointer() -> None:
    """Forget the remembered focus session."""
    state_file = get_config_dir() / "focus.json"
    state_file.unlink(missing_ok=True)

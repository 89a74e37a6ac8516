"""Workspace document I/O.

Reads and writes JSON documents for the repositories. Failures come back
as ``Err`` with a readable message; nothing here raises for I/O problems.
"""

import json
import logging
import shutil
from pathlib import Path
from typing import Any

from deepfocus.domain.shared.result import Err, Ok, Result

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".bak"


def _describe(error: OSError, action: str, path: Path) -> str:
    if isinstance(error, PermissionError):
        return f"Permission denied {action} {path}"
    return f"Error {action} {path}: {error}"


class JsonStorage:
    """JSON documents on disk.

    Writes go to a sibling temp file that is renamed over the target, so a
    crash mid-write leaves the previous document intact. With ``keep_backup``
    the previous document is also kept as ``<name>.bak``.

    Example:
        storage = JsonStorage(keep_backup=True)
        storage.save_json(Path("workspace.json"), workspace.model_dump(mode="json"))
    """

    def __init__(self, keep_backup: bool = False) -> None:
        self.keep_backup = keep_backup

    def load_json(self, path: Path) -> Result[dict[str, Any], str]:
        """Read a JSON object from ``path``.

        Returns:
            Ok(dict) with the document, or Err(str) if the file is missing,
            unreadable, or not a JSON object.
        """
        if not path.exists():
            return Err(f"File not found: {path}")
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            return Err(f"Invalid JSON in {path}: {e}")
        except OSError as e:
            return Err(_describe(e, "reading", path))

        if not isinstance(data, dict):
            return Err(f"Expected a JSON object in {path}, got {type(data).__name__}")
        return Ok(data)

    def save_json(self, path: Path, data: dict[str, Any], indent: int = 2) -> Result[None, str]:
        """Write ``data`` to ``path`` atomically."""
        try:
            content = json.dumps(data, indent=indent)
        except (TypeError, ValueError) as e:
            return Err(f"Data not JSON serializable: {e}")

        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(content, encoding="utf-8")
            if self.keep_backup and path.exists():
                shutil.copy2(path, path.with_suffix(path.suffix + BACKUP_SUFFIX))
            tmp_path.replace(path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            return Err(_describe(e, "writing", path))

        logger.debug(f"Wrote {len(content)} bytes to {path}")
        return Ok(None)

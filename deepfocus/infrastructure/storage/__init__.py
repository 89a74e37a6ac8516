"""Storage infrastructure for deepfocus.

Provides the persistence layer for the workspace aggregate,
using Result monads for explicit error handling.
"""

from deepfocus.infrastructure.storage.json_storage import JsonStorage
from deepfocus.infrastructure.storage.repositories import WorkspaceRepository, slugify

__all__ = [
    "JsonStorage",
    "WorkspaceRepository",
    "slugify",
]

"""Shared domain building blocks.

- Result monad for explicit error handling
- Base domain event

Example usage:
    >>> from deepfocus.domain.shared import Ok, Err, Result, is_ok
    >>>
    >>> def find_project(project_id: str) -> Result[dict, str]:
    ...     if project_id == "missing":
    ...         return Err("Project not found")
    ...     return Ok({"id": project_id})
"""

from deepfocus.domain.shared.events import DomainEvent
from deepfocus.domain.shared.result import (
    Err,
    Ok,
    Result,
    flat_map,
    is_err,
    is_ok,
    map_result,
    unwrap_or,
)

__all__ = [
    # Result monad
    "Ok",
    "Err",
    "Result",
    "is_ok",
    "is_err",
    "map_result",
    "flat_map",
    "unwrap_or",
    # Domain events
    "DomainEvent",
]

"""Focus domain - selection of the next task to present."""

from .selection import FocusState, pick_next

__all__ = ["FocusState", "pick_next"]

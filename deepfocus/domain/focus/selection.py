"""Hierarchical priority descent.

``pick_next`` chooses the task Focus Mode presents next. The tier of a
task's ancestors always outranks the tier of the task itself: the search
settles on the best sibling at the top level first, descends into it, and
only backtracks when a branch offers nothing but the excluded task.
"""

import logging
import random
from enum import Enum

from deepfocus.domain.task.models import TIER_ORDER, Task

logger = logging.getLogger(__name__)


class FocusState(str, Enum):
    """State of a focus session."""

    IDLE = "idle"
    ACTIVE = "active"
    ALL_COMPLETE = "all-complete"
    EXHAUSTED = "exhausted"


def pick_next(
    siblings: list[Task],
    exclude_id: str | None = None,
    rng: random.Random | None = None,
) -> Task | None:
    """Pick the next leaf to present from a sibling group.

    Tiers are visited Preferred, Normal, Deferred. Siblings sharing a tier
    are tried in uniformly random order, the only randomness involved. A
    leaf is returned unless it is ``exclude_id``; a non-leaf is searched
    recursively with the same exclusion.

    Args:
        siblings: The sibling group to search (completed ones are skipped)
        exclude_id: Id of a leaf that must not be returned
        rng: Random source for tie-breaks, an unseeded one if None

    Returns:
        The chosen task, or None if nothing eligible exists below
    """
    rng = rng or random.Random()
    for tier in TIER_ORDER:
        candidates = [t for t in siblings if not t.completed and t.priority == tier]
        rng.shuffle(candidates)
        for candidate in candidates:
            if candidate.is_leaf():
                if candidate.id != exclude_id:
                    return candidate
                continue
            found = pick_next(candidate.incomplete_subtasks(), exclude_id, rng)
            if found is not None:
                return found
    return None

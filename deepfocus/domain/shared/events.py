"""Base domain event infrastructure.

Domain events are immutable records of something that happened to the task
tree. Mutations hand them back inside their change-set so a change-tracking
or sync layer can react without being called inline.

Example usage:
    >>> from deepfocus.domain.task.events import TaskCompleted
    >>> event = TaskCompleted(task_path="inbox/t1", task_name="Write report")
    >>> print(f"Event {event.event_id} occurred at {event.timestamp}")
"""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field


class DomainEvent(BaseModel):
    """Base class for all domain events.

    Each event has a unique ID and a UTC timestamp of when it occurred.
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    model_config = {"frozen": True}

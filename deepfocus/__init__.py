"""deepfocus - hierarchical task manager with a one-task-at-a-time focus mode."""

__version__ = "0.1.0"

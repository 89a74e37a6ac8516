"""Infrastructure layer for deepfocus (file storage)."""

"""User-facing interfaces for deepfocus (command line)."""

"""Entry point for the deepfocus CLI.

Usage:
    python -m deepfocus.interfaces.cli.main

Or via installed entry point:
    deepfocus <command>
"""

from deepfocus.interfaces.cli import app


def main() -> None:
    """Run the deepfocus CLI application."""
    app()


if __name__ == "__main__":
    main()

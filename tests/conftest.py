"""Shared pytest fixtures."""

import random

import pytest


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source so tie-breaks are reproducible."""
    return random.Random(1234)


@pytest.fixture
def config_home(tmp_path, monkeypatch):
    """Point the config directory at a temporary location."""
    home = tmp_path / "home"
    monkeypatch.setenv("DEEPFOCUS_HOME", str(home))
    monkeypatch.delenv("DEEPFOCUS_WORKSPACE", raising=False)
    return home

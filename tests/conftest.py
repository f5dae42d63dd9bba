"""Shared fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest

from clawtutor.config.environment import Environment


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """A fake user home directory."""
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def make_env(home: Path) -> Callable[..., Environment]:
    """Build an Environment from keyword variables, rooted at the fake home."""

    def _make(**environ: str) -> Environment:
        return Environment.from_env(environ, home=home)

    return _make

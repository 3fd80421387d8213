"""Pytest configuration for the Pickleball Club backend tests."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from pickleball_club.config import ENV_PREFIX  # noqa: E402
from pickleball_club.main import create_app  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep PICKLEBALL_* variables from the developer's shell out of the tests."""
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name)


def write_profile(directory: Path, profile: str, **values: str) -> Path:
    """Write ``<profile>.env`` with PICKLEBALL_* keys built from ``values``."""
    path = directory / f"{profile}.env"
    lines = [f"{ENV_PREFIX}{key.upper()}={value}" for key, value in values.items()]
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture()
def database_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'pickleball-test.db'}"


@pytest.fixture()
def profile_dir(tmp_path: Path, database_url: str) -> Path:
    """A profile directory holding a complete, valid "test" profile."""
    directory = tmp_path / "profiles"
    directory.mkdir()
    write_profile(
        directory,
        "test",
        datasource_url=database_url,
        club_name="Test Pickleball Club",
        club_timezone="UTC",
    )
    return directory


@pytest.fixture()
def client(profile_dir: Path) -> Generator[TestClient, None, None]:
    app = create_app(profile="test", env_dir=profile_dir)
    with TestClient(app) as test_client:
        yield test_client

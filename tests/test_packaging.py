"""Tests for the project metadata."""

import tomllib
from pathlib import Path

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


def test_python_floor_covers_datetime_utc():
    # fintrack.database.models imports datetime.UTC, added in Python 3.11
    with PYPROJECT.open("rb") as handle:
        project = tomllib.load(handle)["project"]

    assert project["requires-python"] == ">=3.11"

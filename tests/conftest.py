"""Pytest configuration and shared fixtures for repository test runs."""

from __future__ import annotations

import shutil
import sys
from pathlib import Path

import pytest

FIXTURES_ROOT = Path(__file__).resolve().parent / "fixtures"


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


def copy_fixture(name: str, target_dir: Path) -> Path:
    """Copy a table fixture into a writable directory.

    Args:
        name: File name under tests/fixtures.
        target_dir: Destination directory.

    Returns:
        Path of the copied table file.
    """
    target_path = target_dir / name
    shutil.copyfile(FIXTURES_ROOT / name, target_path)
    return target_path


@pytest.fixture
def people_path(tmp_path: Path) -> Path:
    """Writable copy of the three-row people table."""
    return copy_fixture("people.csv", tmp_path)


@pytest.fixture
def table_fixture(tmp_path: Path):
    """Factory that copies any named table fixture into tmp_path."""
    return lambda name: copy_fixture(name, tmp_path)

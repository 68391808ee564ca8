"""
Pytest configuration to ensure paths are set up correctly for tests.

This allows imports like `from handlers import booking` to work when
running tests, simulating the Lambda environment where code is deployed
from the src/ directory.
"""

import os
import sys
from pathlib import Path

import pytest


def _ensure_paths_on_sys_path() -> None:
    """Add src/ to sys.path if missing."""
    src_root = Path(__file__).resolve().parents[1] / "src"
    src_str = str(src_root)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


_ensure_paths_on_sys_path()

# Offline-friendly defaults so nothing reaches AWS or a real database.
os.environ.setdefault("AWS_REGION", "eu-west-2")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-2")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")
os.environ.setdefault("ENVIRONMENT", "dev")
os.environ.setdefault("LOG_LEVEL", "WARNING")


@pytest.fixture
def engine():
    """In-memory SQLite engine with the booking tables created."""
    from sqlalchemy import create_engine
    from sqlalchemy.pool import StaticPool

    from repositories.booking_repo import metadata

    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    metadata.create_all(eng)
    yield eng
    eng.dispose()

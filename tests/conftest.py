"""
Pytest configuration and fixtures for Docbot tests.
"""

import sys
from pathlib import Path

import pytest

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from docbot.database.db_connection import ConnectionManager  # noqa: E402
from docbot.scheduler.job_store import JobStore  # noqa: E402


@pytest.fixture
async def db(tmp_path: Path):
    """A fresh database connection on a temporary file."""
    manager = ConnectionManager()
    await manager.open(tmp_path / "test.db")
    yield manager
    await manager.close()


@pytest.fixture
async def store(db: ConnectionManager) -> JobStore:
    return JobStore(db)

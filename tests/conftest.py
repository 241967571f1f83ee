"""
Pytest configuration and fixtures.
"""

import os
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Set test environment
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("STORAGE_BACKEND", "memory")


@pytest_asyncio.fixture
async def memory_repo():
    """Connected in-memory repository with a short timeout."""
    from core.storage.memory import InMemoryContactRepository

    repo = InMemoryContactRepository(timeout_seconds=0.5)
    await repo.connect()
    yield repo
    await repo.close()


@pytest.fixture
def motor(monkeypatch):
    """
    Replace the motor client class with a mock.

    Returns the client factory, the client and the single collection
    every `client[db][name]` lookup resolves to.
    """
    from core.storage import mongodb

    collection = MagicMock(name="collection")
    database = MagicMock(name="database")
    database.__getitem__.return_value = collection

    client = MagicMock(name="client")
    client.__getitem__.return_value = database
    client.admin.command = AsyncMock(return_value={"ok": 1.0})

    factory = MagicMock(return_value=client)
    monkeypatch.setattr(mongodb, "AsyncIOMotorClient", factory)

    return SimpleNamespace(
        factory=factory,
        client=client,
        database=database,
        collection=collection,
    )

"""
Storage factory for creating contact repository instances.

This module picks the repository implementation based on configuration.
"""

from enum import Enum
from typing import TYPE_CHECKING

from core.logging import get_logger
from core.storage.base import BaseContactRepository


if TYPE_CHECKING:
    from core.config import Settings


logger = get_logger(__name__)


class StorageBackend(str, Enum):
    """Supported storage backends."""
    MONGODB = "mongodb"
    MEMORY = "memory"


def get_storage_backend(settings: "Settings") -> StorageBackend:
    """
    Determine which storage backend to use based on settings.

    Args:
        settings: Application settings

    Returns:
        The configured storage backend
    """
    backend_str = settings.storage_backend.lower()

    try:
        return StorageBackend(backend_str)
    except ValueError:
        raise ValueError(
            f"Unsupported storage backend: {backend_str}. "
            f"Supported backends: {[b.value for b in StorageBackend]}"
        )


def create_contact_repository(settings: "Settings") -> BaseContactRepository:
    """
    Create a contact repository instance based on settings.

    Args:
        settings: Application settings

    Returns:
        Configured repository instance (not yet connected)
    """
    backend = get_storage_backend(settings)

    if backend == StorageBackend.MONGODB:
        from core.storage.mongodb import MongoDBConnection, MongoDBContactRepository

        logger.info(
            "Creating MongoDB contact repository",
            database=settings.mongodb_database,
            collection=settings.mongodb_collection,
        )
        connection = MongoDBConnection(
            connection_string=settings.mongodb_url,
            database_name=settings.mongodb_database,
            timeout_seconds=settings.operation_timeout_seconds,
            username=settings.mongodb_user,
            password=settings.mongodb_password,
        )
        return MongoDBContactRepository(
            connection,
            collection_name=settings.mongodb_collection,
            timeout_seconds=settings.operation_timeout_seconds,
        )

    elif backend == StorageBackend.MEMORY:
        from core.storage.memory import InMemoryContactRepository

        logger.info("Creating in-memory contact repository")
        return InMemoryContactRepository(
            timeout_seconds=settings.operation_timeout_seconds,
        )

    else:
        raise ValueError(f"Unsupported backend: {backend}")

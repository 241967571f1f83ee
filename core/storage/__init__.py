"""
Storage abstraction layer.

Provides contact repositories with a shared contract and error hierarchy.

Supported backends:
- MongoDB (default)
- In-memory (tests and offline demo runs)
"""

from core.storage.base import (
    BaseContactRepository,
    Contact,
    ContactNotFoundError,
    DecodeError,
    OperationTimeoutError,
    QueryError,
    StorageConnectionError,
    StorageError,
)
from core.storage.factory import (
    create_contact_repository,
    get_storage_backend,
    StorageBackend,
)

__all__ = [
    # Record and abstract interface
    "Contact",
    "BaseContactRepository",
    # Errors
    "StorageError",
    "StorageConnectionError",
    "OperationTimeoutError",
    "QueryError",
    "DecodeError",
    "ContactNotFoundError",
    # Factory functions
    "create_contact_repository",
    "get_storage_backend",
    "StorageBackend",
]

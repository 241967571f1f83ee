"""
In-memory contact repository.

Keeps documents in a list in insertion order and follows the same
contract as the MongoDB backend, including decoding, timeouts and
the not-found error. Used for tests and for running the demo without
a server.
"""

import asyncio
from typing import Any, Awaitable, Optional, TypeVar

from core.logging import get_logger
from core.storage.base import (
    BaseContactRepository,
    Contact,
    ContactNotFoundError,
    OperationTimeoutError,
    StorageConnectionError,
)


logger = get_logger(__name__)

T = TypeVar("T")


class InMemoryContactRepository(BaseContactRepository):
    """
    Contact repository backed by a Python list.

    Usage:
        repo = InMemoryContactRepository()
        await repo.connect()
        await repo.insert(Contact("Jane", "jane@example.com", "555"))
        contact = await repo.find_by_email("jane@example.com")
    """

    def __init__(
        self,
        timeout_seconds: float = 5.0,
        latency_seconds: float = 0.0,
    ):
        """
        Initialize the repository.

        Args:
            timeout_seconds: Window applied to each operation
            latency_seconds: Simulated round-trip delay per operation
        """
        self._documents: list[dict[str, Any]] = []
        self._timeout = timeout_seconds
        self._latency = latency_seconds
        self._available = True
        self._connected = False
        self._lock = asyncio.Lock()

    async def _bounded(self, awaitable: Awaitable[T], operation: str) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            raise OperationTimeoutError(
                f"{operation} did not finish within {self._timeout}s"
            ) from exc

    async def _round_trip(self) -> None:
        if not self._available:
            raise StorageConnectionError("In-memory store is unavailable")
        if not self._connected:
            raise RuntimeError("Repository not initialized. Call connect() first.")
        if self._latency:
            await asyncio.sleep(self._latency)

    def _match(self, email: str) -> Optional[dict[str, Any]]:
        for doc in self._documents:
            if doc.get("email") == email:
                return doc
        return None

    async def connect(self) -> None:
        """Mark the store connected and run the health check."""
        if not self._available:
            raise StorageConnectionError("In-memory store is unavailable")
        self._connected = True
        try:
            await self.ping()
        except StorageConnectionError:
            self._connected = False
            raise
        logger.info("Connected to in-memory store")

    async def ping(self) -> None:
        """Simulated round-trip; a slow or unavailable store is a connection failure."""
        try:
            await self._bounded(self._round_trip(), "ping")
        except OperationTimeoutError as exc:
            raise StorageConnectionError(str(exc)) from exc

    async def insert(self, contact: Contact) -> None:
        """Append a contact document."""
        async def op() -> None:
            await self._round_trip()
            async with self._lock:
                self._documents.append(contact.to_dict())

        await self._bounded(op(), "insert")
        logger.debug("Contact inserted", email=contact.email)

    async def find_all(self) -> list[Contact]:
        """Return every stored contact in insertion order."""
        async def op() -> list[dict[str, Any]]:
            await self._round_trip()
            async with self._lock:
                return [dict(doc) for doc in self._documents]

        docs = await self._bounded(op(), "find_all")
        return [Contact.from_dict(doc) for doc in docs]

    async def update_by_email(self, email: str, contact: Contact) -> bool:
        """Overwrite name and phone of the first contact with this email."""
        async def op() -> bool:
            await self._round_trip()
            async with self._lock:
                doc = self._match(email)
                if doc is None:
                    return False
                doc["name"] = contact.name
                doc["phone"] = contact.phone
                return True

        return await self._bounded(op(), "update_by_email")

    async def find_by_email(self, email: str) -> Contact:
        """Get the first contact with this email."""
        async def op() -> Optional[dict[str, Any]]:
            await self._round_trip()
            async with self._lock:
                doc = self._match(email)
                return dict(doc) if doc is not None else None

        doc = await self._bounded(op(), "find_by_email")
        if doc is None:
            raise ContactNotFoundError(email)
        return Contact.from_dict(doc)

    async def delete_by_email(self, email: str) -> bool:
        """Delete the first contact with this email."""
        async def op() -> bool:
            await self._round_trip()
            async with self._lock:
                doc = self._match(email)
                if doc is None:
                    return False
                self._documents.remove(doc)
                return True

        return await self._bounded(op(), "delete_by_email")

    async def close(self) -> None:
        """Mark the store disconnected. Stored documents are kept."""
        if self._connected:
            self._connected = False
            logger.info("Disconnected from in-memory store")

    # =========================================
    # Testing utilities
    # =========================================

    def set_available(self, available: bool) -> None:
        """Simulate the server going away (or coming back)."""
        self._available = available

    def set_latency(self, seconds: float) -> None:
        """Change the simulated delay for subsequent operations."""
        self._latency = seconds

    async def insert_raw_document(self, document: dict[str, Any]) -> None:
        """Store a document as-is, bypassing Contact encoding."""
        async with self._lock:
            self._documents.append(dict(document))

    async def clear(self) -> None:
        """Drop every stored document (for testing)."""
        async with self._lock:
            self._documents.clear()

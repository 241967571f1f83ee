"""
Abstract base classes for contact storage backends.

This module defines the record type, the repository contract that every
backend follows, and the storage error hierarchy shared by all of them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping


CONTACT_FIELDS = ("name", "email", "phone")


@dataclass
class Contact:
    """
    A contact as stored in the `contacts` collection.

    `email` is the lookup key. Uniqueness is a convention only,
    nothing in the storage layer enforces it.
    """
    name: str
    email: str
    phone: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to a document for insertion."""
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Contact":
        """
        Create from a stored document.

        Extra fields such as `_id` are ignored.

        Raises:
            DecodeError: If a field is missing or is not a string
        """
        values: dict[str, str] = {}
        for field_name in CONTACT_FIELDS:
            if field_name not in data:
                raise DecodeError(f"Contact document has no '{field_name}' field")
            value = data[field_name]
            if not isinstance(value, str):
                raise DecodeError(
                    f"Contact field '{field_name}' must be a string, "
                    f"got {type(value).__name__}"
                )
            values[field_name] = value
        return cls(**values)

    def __str__(self) -> str:
        return f"{{{self.name} {self.email} {self.phone}}}"


class BaseContactRepository(ABC):
    """
    Abstract base class for contact storage.

    Every operation is bounded by the repository's operation timeout and
    raises a StorageError subclass on failure. Lookups, updates and deletes
    are keyed on the contact's email.
    """

    @abstractmethod
    async def connect(self) -> None:
        """
        Open the connection and verify it with a health check.

        Raises:
            StorageConnectionError: If the server cannot be reached
        """
        pass

    @abstractmethod
    async def ping(self) -> None:
        """
        Round-trip to the server to confirm it is reachable.

        Raises:
            StorageConnectionError: On timeout or refusal
        """
        pass

    @abstractmethod
    async def insert(self, contact: Contact) -> None:
        """Insert a new contact document."""
        pass

    @abstractmethod
    async def find_all(self) -> list[Contact]:
        """
        Return every contact in the collection, fully materialized.

        Raises:
            QueryError: If the server rejects the query
            DecodeError: If a stored document is not a valid contact
        """
        pass

    @abstractmethod
    async def update_by_email(self, email: str, contact: Contact) -> bool:
        """
        Replace the non-key fields of the contact with this email.

        Returns True if a document matched. No match is not an error.
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Contact:
        """
        Get a contact by email.

        Raises:
            ContactNotFoundError: If no document has this email
        """
        pass

    @abstractmethod
    async def delete_by_email(self, email: str) -> bool:
        """
        Delete the first contact with this email.

        Returns True if a document was removed. No match is not an error.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the connection."""
        pass


class StorageError(Exception):
    """Base exception for contact storage operations."""
    pass


class StorageConnectionError(StorageError, ConnectionError):
    """The server link could not be established or was lost."""
    pass


class OperationTimeoutError(StorageError, TimeoutError):
    """An operation did not finish inside its window."""
    pass


class QueryError(StorageError):
    """The request was malformed or the server failed to execute it."""
    pass


class DecodeError(StorageError):
    """A stored document does not have the shape of a contact."""
    pass


class ContactNotFoundError(StorageError):
    """No contact matched the lookup key."""

    def __init__(self, email: str):
        super().__init__(f"No contact with email {email!r}")
        self.email = email

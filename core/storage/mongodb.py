"""
MongoDB storage backend implementation.

Provides:
- MongoDBConnection: client lifecycle and health check
- MongoDBContactRepository: contact CRUD on a single collection

All server calls go through motor and are bounded by the configured
operation timeout.
"""

import asyncio
from typing import Any, Awaitable, Optional, TypeVar

from bson.errors import InvalidBSON
from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo.errors import (
    ConfigurationError,
    ConnectionFailure,
    ExecutionTimeout,
    NetworkTimeout,
    PyMongoError,
)

from core.logging import get_logger
from core.storage.base import (
    BaseContactRepository,
    Contact,
    ContactNotFoundError,
    DecodeError,
    OperationTimeoutError,
    QueryError,
    StorageConnectionError,
)


logger = get_logger(__name__)

T = TypeVar("T")

# Server selection gives up before the operation window closes, so an
# unreachable server surfaces as a connection error rather than a timeout.
SERVER_SELECTION_FRACTION = 0.8


def server_selection_timeout_ms(timeout: float) -> int:
    return max(1, int(timeout * 1000 * SERVER_SELECTION_FRACTION))


async def run_bounded(awaitable: Awaitable[T], timeout: float, operation: str) -> T:
    """
    Await a driver call inside a fresh window of `timeout` seconds.

    Driver exceptions are translated into the storage error hierarchy.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as exc:
        raise OperationTimeoutError(
            f"{operation} did not finish within {timeout}s"
        ) from exc
    except (NetworkTimeout, ExecutionTimeout) as exc:
        raise OperationTimeoutError(f"{operation} timed out: {exc}") from exc
    except ConnectionFailure as exc:
        raise StorageConnectionError(f"{operation} lost the server: {exc}") from exc
    except InvalidBSON as exc:
        raise DecodeError(f"{operation} received an undecodable reply: {exc}") from exc
    except PyMongoError as exc:
        raise QueryError(f"{operation} failed: {exc}") from exc


class MongoDBConnection:
    """
    Owns the motor client for one database.

    Usage:
        connection = MongoDBConnection("mongodb://localhost:27017", "testdb")
        await connection.connect()
        contacts = connection.get_collection("contacts")
        ...
        await connection.close()
    """

    def __init__(
        self,
        connection_string: str,
        database_name: str = "testdb",
        *,
        timeout_seconds: float = 5.0,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ):
        """
        Initialize the connection manager. Nothing is opened yet.

        Args:
            connection_string: MongoDB connection URI
            database_name: Database holding the contacts collection
            timeout_seconds: Bound for the health check and server selection
            username: Optional user, passed to the client when set
            password: Optional password, passed to the client when set
        """
        self._connection_string = connection_string
        self._database_name = database_name
        self._timeout = timeout_seconds
        self._username = username
        self._password = password
        self._client: Optional[AsyncIOMotorClient] = None
        self._db: Optional[AsyncIOMotorDatabase] = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def connect(self) -> None:
        """
        Create the client and verify the server answers.

        Raises:
            StorageConnectionError: Bad URI, or the health check failed
        """
        if self._client is not None:
            return

        client_options: dict[str, Any] = {
            "serverSelectionTimeoutMS": server_selection_timeout_ms(self._timeout),
        }
        if self._username is not None:
            client_options["username"] = self._username
        if self._password is not None:
            client_options["password"] = self._password

        try:
            self._client = AsyncIOMotorClient(self._connection_string, **client_options)
        except (ConfigurationError, ValueError, TypeError) as exc:
            raise StorageConnectionError(
                f"Invalid MongoDB configuration: {exc}"
            ) from exc
        self._db = self._client[self._database_name]

        try:
            await self.ping()
        except StorageConnectionError:
            await self.close()
            raise

        logger.info("Connected to MongoDB", database=self._database_name)

    async def ping(self) -> None:
        """
        Blocking round-trip to the server.

        Timeout or refusal is reported as a connection failure.
        """
        if self._client is None:
            raise RuntimeError("Connection not initialized. Call connect() first.")

        try:
            await asyncio.wait_for(
                self._client.admin.command("ping"),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as exc:
            raise StorageConnectionError(
                f"MongoDB did not answer ping within {self._timeout}s"
            ) from exc
        except PyMongoError as exc:
            raise StorageConnectionError(f"Failed to ping MongoDB: {exc}") from exc

    def get_collection(self, name: str) -> AsyncIOMotorCollection:
        """Get a collection handle from the connected database."""
        if self._db is None:
            raise RuntimeError("Connection not initialized. Call connect() first.")
        return self._db[name]

    async def close(self) -> None:
        """Close the client. Safe to call more than once."""
        if self._client is not None:
            self._client.close()
            self._client = None
            self._db = None
            logger.info("Disconnected from MongoDB", database=self._database_name)


class MongoDBContactRepository(BaseContactRepository):
    """
    MongoDB-based contact repository.

    Documents are stored as {"name", "email", "phone"}; the server
    assigns `_id`, which is dropped on read.
    """

    def __init__(
        self,
        connection: MongoDBConnection,
        collection_name: str = "contacts",
        *,
        timeout_seconds: float = 5.0,
    ):
        """
        Initialize the repository.

        Args:
            connection: Connection manager, connected by connect()
            collection_name: Collection holding contact documents
            timeout_seconds: Window applied to each operation
        """
        self._connection = connection
        self._collection_name = collection_name
        self._timeout = timeout_seconds

    @property
    def _collection(self) -> AsyncIOMotorCollection:
        return self._connection.get_collection(self._collection_name)

    async def connect(self) -> None:
        await self._connection.connect()

    async def ping(self) -> None:
        await self._connection.ping()

    async def insert(self, contact: Contact) -> None:
        """Insert a contact document."""
        await run_bounded(
            self._collection.insert_one(contact.to_dict()),
            self._timeout,
            "insert",
        )

        logger.debug(
            "Contact inserted",
            collection=self._collection_name,
            email=contact.email,
        )

    async def find_all(self) -> list[Contact]:
        """Fetch every contact document."""
        collection = self._collection

        async def fetch() -> list[dict[str, Any]]:
            cursor = collection.find({})
            try:
                return await cursor.to_list(length=None)
            finally:
                await cursor.close()

        docs = await run_bounded(fetch(), self._timeout, "find_all")

        contacts = []
        for doc in docs:
            doc.pop("_id", None)
            contacts.append(Contact.from_dict(doc))
        return contacts

    async def update_by_email(self, email: str, contact: Contact) -> bool:
        """Overwrite name and phone of the contact with this email."""
        result = await run_bounded(
            self._collection.update_one(
                {"email": email},
                {"$set": {"name": contact.name, "phone": contact.phone}},
            ),
            self._timeout,
            "update_by_email",
        )

        if result.matched_count == 0:
            logger.debug("No contact to update", email=email)
            return False
        return True

    async def find_by_email(self, email: str) -> Contact:
        """Get the contact with this email."""
        doc = await run_bounded(
            self._collection.find_one({"email": email}),
            self._timeout,
            "find_by_email",
        )
        if doc is None:
            raise ContactNotFoundError(email)

        doc.pop("_id", None)
        return Contact.from_dict(doc)

    async def delete_by_email(self, email: str) -> bool:
        """Delete the first contact with this email."""
        result = await run_bounded(
            self._collection.delete_one({"email": email}),
            self._timeout,
            "delete_by_email",
        )

        if result.deleted_count == 0:
            logger.debug("No contact to delete", email=email)
            return False
        return True

    async def close(self) -> None:
        await self._connection.close()

"""MongoConnectionManager — Motor client, default database and document stores."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .exceptions import MongoConnectionError
from .store import MongoDocumentStore

if TYPE_CHECKING:
    from motor.motor_asyncio import (
        AsyncIOMotorClient,
        AsyncIOMotorClientSession,
        AsyncIOMotorCollection,
        AsyncIOMotorDatabase,
    )

logger = logging.getLogger("occ.mongo.connection")


class MongoConnectionManager:
    """Own the Motor client that conditional updates are issued through.

    Extra keywords such as ``w`` or ``retryWrites`` go to
    ``AsyncIOMotorClient`` unchanged.
    """

    def __init__(
        self,
        url: str = "mongodb://localhost:27017",
        *,
        database: str | None = None,
        server_selection_timeout_ms: int = 5000,
        connect_timeout_ms: int = 10000,
        **client_options: Any,
    ) -> None:
        self._url = url
        self._database = database
        self._client_options: dict[str, Any] = {
            "serverSelectionTimeoutMS": server_selection_timeout_ms,
            "connectTimeoutMS": connect_timeout_ms,
            **client_options,
        }
        self._client: AsyncIOMotorClient[Any] | None = None

    @property
    def client_options(self) -> dict[str, Any]:
        return dict(self._client_options)

    async def connect(self) -> AsyncIOMotorClient[Any]:
        """Create the client on first call; later calls return the same one."""
        if self._client is not None:
            return self._client
        try:
            from motor.motor_asyncio import AsyncIOMotorClient
        except ImportError as e:
            raise MongoConnectionError(
                "motor is required; install with motor>=3.3.0"
            ) from e
        try:
            self._client = AsyncIOMotorClient(self._url, **self._client_options)
        except Exception as e:
            raise MongoConnectionError(str(e)) from e
        logger.debug("Created Motor client (database=%s)", self._database)
        return self._client

    @property
    def client(self) -> AsyncIOMotorClient[Any]:
        if self._client is None:
            raise MongoConnectionError("Not connected; call connect() first")
        return self._client

    def database(self, name: str | None = None) -> AsyncIOMotorDatabase[Any]:
        """Return ``name`` or the configured default database."""
        database_name = name or self._database
        if not database_name:
            raise MongoConnectionError(
                "Database name must be passed or set on the connection"
            )
        return self.client.get_database(database_name)

    def collection(
        self, name: str, *, database: str | None = None
    ) -> AsyncIOMotorCollection[Any]:
        return self.database(database).get_collection(name)

    def document_store(
        self, collection: str, *, database: str | None = None
    ) -> MongoDocumentStore:
        """A conditional-update store over one collection."""
        return MongoDocumentStore(self.collection(collection, database=database))

    async def start_session(self, **options: Any) -> AsyncIOMotorClientSession:
        """Start a client session to pass as ``session=`` to store operations.

        The caller owns the session and must end it, typically with
        ``async with await connection.start_session() as session:``.
        """
        return await self.client.start_session(**options)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    async def health_check(self) -> bool:
        """Ping the server; False when not connected or unreachable."""
        if self._client is None:
            return False
        try:
            await self._client.admin.command("ping")
        except Exception as e:  # noqa: BLE001
            logger.warning("MongoDB health check failed: %s", e)
            return False
        return True

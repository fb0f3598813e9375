"""MongoConnectionManager — one lazily created Motor client per application."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .exceptions import MongoConnectionError

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase


class MongoConnectionManager:
    """Own the Motor client every resource store reads its database from.

    Stores call :meth:`get_database` per operation, so the manager can be
    created at import time and connected in an application startup hook.
    """

    def __init__(
        self,
        url: str = "mongodb://localhost:27017",
        *,
        database: str | None = None,
        server_selection_timeout_ms: int = 5000,
        **client_options: Any,
    ) -> None:
        self.url = url
        self.database_name = database
        self._client_options = {
            "serverSelectionTimeoutMS": server_selection_timeout_ms,
            **client_options,
        }
        self._client: AsyncIOMotorClient[Any] | None = None

    async def connect(self) -> AsyncIOMotorClient[Any]:
        """Create the client on first call and return it on every call."""
        if self._client is None:
            from motor.motor_asyncio import AsyncIOMotorClient

            try:
                self._client = AsyncIOMotorClient(self.url, **self._client_options)
            except Exception as e:
                raise MongoConnectionError(str(e)) from e
        return self._client

    def get_database(self) -> AsyncIOMotorDatabase[Any]:
        """The named database, or the default one from the connection URL."""
        if self._client is None:
            raise MongoConnectionError("Not connected; call connect() first")
        if self.database_name:
            return self._client.get_database(self.database_name)
        return self._client.get_database()

    def close(self) -> None:
        """Close the client; a later :meth:`connect` opens a new one."""
        if self._client is not None:
            self._client.close()
            self._client = None

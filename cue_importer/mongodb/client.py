"""Shared motor client for the pattern store and learned track database."""

import logging
from functools import cache

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from cue_importer.mongodb.config import MongoDBConfig, get_mongodb_config

logger = logging.getLogger(__name__)


class MongoDBClient:
    """Opens the motor client on first use and hands out the cue database.

    Repositories created before the app shuts down share one connection pool;
    after ``close()`` the next access opens a fresh client.
    """

    def __init__(self, config: MongoDBConfig) -> None:
        self.config = config
        self._client: AsyncIOMotorClient | None = None

    @property
    def is_open(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> AsyncIOMotorClient:
        if self._client is None:
            self._client = AsyncIOMotorClient(
                self.config.connection_string,
                appname=self.config.app_name,
                maxPoolSize=self.config.max_pool_size,
                minPoolSize=self.config.min_pool_size,
                serverSelectionTimeoutMS=self.config.server_selection_timeout_ms,
            )
            logger.info("[mongodb] Opened client for database=%s", self.config.database_name)
        return self._client

    @property
    def database(self) -> AsyncIOMotorDatabase:
        return self.client[self.config.database_name]

    async def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("[mongodb] Closed client for database=%s", self.config.database_name)


@cache
def get_mongodb_client() -> MongoDBClient:
    """The process-wide client, configured from the environment."""
    return MongoDBClient(get_mongodb_config())

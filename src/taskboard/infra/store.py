# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""MongoDB connection handling (motor)."""

from __future__ import annotations

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from taskboard.config import Settings
from taskboard.errors import StoreUnavailable

logger = logging.getLogger(__name__)


def make_client(settings: Settings) -> AsyncIOMotorClient:
    return AsyncIOMotorClient(settings.mongo_uri, serverSelectionTimeoutMS=settings.mongo_timeout_ms)


async def connect(settings: Settings) -> tuple[AsyncIOMotorClient, AsyncIOMotorDatabase]:
    """Open a client and make sure the server answers before serving traffic."""
    client = make_client(settings)
    try:
        await client.admin.command("ping")
    except PyMongoError as e:
        client.close()
        logger.error("MongoDB is not reachable: %s", e)
        raise StoreUnavailable(f"MongoDB is not reachable: {e}") from e
    logger.info("Connected to MongoDB database '%s'", settings.db_name)
    return client, client[settings.db_name]

# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Credential store over the ``users`` collection."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from argon2 import PasswordHasher
from pymongo.errors import PyMongoError
from fastapi.concurrency import run_in_threadpool

from taskboard.auth.models import Identity
from taskboard.auth.passwords import hash_password, make_hasher, verify_password
from taskboard.errors import AlreadyExists, BadCredential, InvalidInput, NotFound, StoreUnavailable

logger = logging.getLogger(__name__)


class CredentialStore:
    """Registers users and checks login attempts.

    ``collection`` is a motor collection (or anything exposing the same
    ``find_one`` / ``insert_one`` coroutines).
    """

    def __init__(self, collection, hasher: PasswordHasher | None = None):
        self.collection = collection
        self.hasher = hasher or make_hasher()

    async def _find_by_email(self, email: str):
        try:
            return await self.collection.find_one({"email": email})
        except PyMongoError as e:
            logger.error("User lookup failed: %s", e)
            raise StoreUnavailable(str(e)) from e

    async def register(self, name: str, email: str, password: str) -> Identity:
        """Create a user. The caller is not logged in as a side effect.

        The existence check and the insert are two separate store calls, so
        two concurrent registrations of the same email can both succeed.
        """
        name = (name or "").strip()
        email = (email or "").strip()
        if not name or not email or not password:
            raise InvalidInput("Name, email and password are required.")

        if await self._find_by_email(email) is not None:
            raise AlreadyExists(email)

        # argon2 is CPU and memory bound; keep it off the event loop.
        hashed = await run_in_threadpool(hash_password, self.hasher, password)
        doc = {
            "name": name,
            "email": email,
            "password": hashed,
            "created_at": datetime.now(timezone.utc),
        }
        try:
            result = await self.collection.insert_one(doc)
        except PyMongoError as e:
            logger.error("User insert failed: %s", e)
            raise StoreUnavailable(str(e)) from e

        doc["_id"] = result.inserted_id
        logger.info("Registered user %s", email)
        return Identity.from_document(doc)

    async def authenticate(self, email: str, password: str) -> Identity:
        email = (email or "").strip()
        doc = await self._find_by_email(email) if email else None
        if doc is None:
            raise NotFound(email)
        stored = str(doc.get("password") or "")
        if not await run_in_threadpool(verify_password, self.hasher, stored, password):
            raise BadCredential(email)
        return Identity.from_document(doc)

# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Task CRUD over the ``todo`` collection.

Listing is global. Reads for editing, updates and deletes are always
filtered by both ``_id`` and ``userId`` so a user can only touch their own
tasks, and a foreign task looks exactly like a missing one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import PyMongoError

from taskboard.auth.models import Identity
from taskboard.core.marker import splice_marker, with_marker
from taskboard.errors import NotOwnedOrMissing, StoreUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Task:
    id: ObjectId
    title: str
    description: str
    user_id: Any
    user_name: str
    completed: bool = False  # stored for compatibility; nothing toggles it
    created_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Task":
        return cls(
            id=doc["_id"],
            title=str(doc.get("title") or ""),
            description=str(doc.get("description") or ""),
            user_id=doc.get("userId"),
            user_name=str(doc.get("userName") or ""),
            completed=bool(doc.get("completed", False)),
            created_at=doc.get("created_at"),
        )

    def is_owned_by(self, owner: Optional[Identity]) -> bool:
        return owner is not None and self.user_id == owner.id


def _object_id(task_id: Any) -> Optional[ObjectId]:
    if isinstance(task_id, ObjectId):
        return task_id
    try:
        return ObjectId(str(task_id))
    except (InvalidId, TypeError):
        return None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TaskService:
    def __init__(self, collection, *, clock: Callable[[], datetime] = _utcnow):
        self.collection = collection
        self.clock = clock

    def _owned_filter(self, task_id: Any, owner: Identity) -> Optional[Dict[str, Any]]:
        oid = _object_id(task_id)
        if oid is None:
            return None
        return {"_id": oid, "userId": owner.id}

    async def list_all(self) -> List[Task]:
        try:
            docs = await self.collection.find({}).to_list(length=None)
        except PyMongoError as e:
            logger.error("Task listing failed: %s", e)
            raise StoreUnavailable(str(e)) from e
        return [Task.from_document(d) for d in docs]

    async def create(self, owner: Identity, title: str, description: str) -> Task:
        now = self.clock()
        doc = {
            "title": title,
            "description": with_marker(now.astimezone().date(), description),
            "userId": owner.id,
            "userName": owner.name,
            "completed": False,
            "created_at": now,
        }
        try:
            result = await self.collection.insert_one(doc)
        except PyMongoError as e:
            logger.error("Task insert failed: %s", e)
            raise StoreUnavailable(str(e)) from e
        doc["_id"] = result.inserted_id
        logger.info("Task %s created by %s", result.inserted_id, owner.email)
        return Task.from_document(doc)

    async def find_owned(self, task_id: Any, owner: Identity) -> Optional[Task]:
        flt = self._owned_filter(task_id, owner)
        if flt is None:
            return None
        try:
            doc = await self.collection.find_one(flt)
        except PyMongoError as e:
            logger.error("Task lookup failed: %s", e)
            raise StoreUnavailable(str(e)) from e
        return Task.from_document(doc) if doc else None

    async def update_owned(self, task_id: Any, owner: Identity, title: str, description: str) -> Task:
        task = await self.find_owned(task_id, owner)
        if task is None:
            logger.warning("Update refused: task %s not found for %s", task_id, owner.email)
            raise NotOwnedOrMissing(str(task_id))

        fields = {"title": title, "description": splice_marker(task.description, description)}
        try:
            result = await self.collection.update_one(
                {"_id": task.id, "userId": owner.id},
                {"$set": fields},
            )
        except PyMongoError as e:
            logger.error("Task update failed: %s", e)
            raise StoreUnavailable(str(e)) from e

        # Deleted between the read and the write.
        if result.matched_count == 0:
            raise NotOwnedOrMissing(str(task_id))

        logger.info("Task %s updated by %s", task.id, owner.email)
        return Task(
            id=task.id,
            title=fields["title"],
            description=fields["description"],
            user_id=task.user_id,
            user_name=task.user_name,
            completed=task.completed,
            created_at=task.created_at,
        )

    async def delete_owned(self, task_id: Any, owner: Identity) -> None:
        flt = self._owned_filter(task_id, owner)
        if flt is None:
            raise NotOwnedOrMissing(str(task_id))
        try:
            result = await self.collection.delete_one(flt)
        except PyMongoError as e:
            logger.error("Task delete failed: %s", e)
            raise StoreUnavailable(str(e)) from e
        if result.deleted_count == 0:
            logger.warning("Delete refused: task %s not found for %s", task_id, owner.email)
            raise NotOwnedOrMissing(str(task_id))
        logger.info("Task %s deleted by %s", flt["_id"], owner.email)

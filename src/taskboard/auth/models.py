# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from bson import ObjectId


@dataclass(frozen=True)
class Identity:
    """Snapshot of a stored user, as loaded at login time."""

    id: ObjectId
    name: str
    email: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "Identity":
        return cls(
            id=doc["_id"],
            name=str(doc.get("name") or ""),
            email=str(doc.get("email") or ""),
            created_at=doc.get("created_at"),
        )

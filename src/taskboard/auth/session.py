# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Server-side sessions.

The cookie only carries an opaque random token, signed with itsdangerous so
tampered or expired cookies are rejected before the lookup. The token maps
to an ``Identity`` snapshot held by a ``SessionStore`` owned by the app.
"""

from __future__ import annotations

import secrets
import time
from typing import Callable, Dict, Optional, Tuple

from itsdangerous import BadSignature, BadTimeSignature, URLSafeTimedSerializer

from taskboard.auth.models import Identity

SESSION_SALT = "taskboard.session.v1"


class SessionStore:
    """In-process token -> identity map.

    Entries older than ``max_age`` seconds are dropped, matching the cookie
    lifetime, so tokens whose cookie has expired do not pile up.
    """

    def __init__(self, max_age: int = 28800, *, clock: Callable[[], float] = time.monotonic) -> None:
        self.max_age = max_age
        self.clock = clock
        self._sessions: Dict[str, Tuple[Identity, float]] = {}

    def _evict_expired(self, now: float) -> None:
        stale = [t for t, (_, created) in self._sessions.items() if now - created >= self.max_age]
        for t in stale:
            del self._sessions[t]

    def create(self, identity: Identity) -> str:
        now = self.clock()
        self._evict_expired(now)
        token = secrets.token_urlsafe(32)
        self._sessions[token] = (identity, now)
        return token

    def get(self, token: str) -> Optional[Identity]:
        if not token:
            return None
        entry = self._sessions.get(token)
        if entry is None:
            return None
        identity, created = entry
        if self.clock() - created >= self.max_age:
            del self._sessions[token]
            return None
        return identity

    def destroy(self, token: str) -> None:
        self._sessions.pop(token, None)

    def __len__(self) -> int:
        return len(self._sessions)


class SessionCookie:
    """Signs and verifies the session token stored in the cookie."""

    def __init__(self, secret: str, *, max_age: int):
        if not secret:
            raise ValueError("Session secret must not be empty")
        self._serializer = URLSafeTimedSerializer(secret_key=secret, salt=SESSION_SALT)
        self.max_age = max_age

    def sign(self, token: str) -> str:
        return self._serializer.dumps({"t": token})

    def unsign(self, value: str) -> Optional[str]:
        if not value:
            return None
        try:
            data = self._serializer.loads(value, max_age=self.max_age)
        except (BadSignature, BadTimeSignature):
            return None
        t = str((data or {}).get("t") or "").strip() if isinstance(data, dict) else ""
        return t or None

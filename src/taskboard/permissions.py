# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from typing import Optional
from urllib.parse import quote

from fastapi import HTTPException, Request

from taskboard.auth.models import Identity


def session_token_from_request(request: Request) -> Optional[str]:
    cookie = request.app.state.session_cookie
    raw = request.cookies.get(request.app.state.settings.cookie_name, "")
    return cookie.unsign(raw)


def load_user_from_request(request: Request) -> Optional[Identity]:
    token = session_token_from_request(request)
    if not token:
        return None
    return request.app.state.sessions.get(token)


def current_user_optional(request: Request) -> Optional[Identity]:
    u = getattr(request.state, "user", None)
    if u is not None:
        return u
    return load_user_from_request(request)


def safe_next(next_url: str) -> str:
    """Only allow local redirect targets."""
    n = (next_url or "").strip()
    if not n.startswith("/") or n.startswith("//") or n.startswith("/\\"):
        return "/"
    return n


def require_user(request: Request) -> Identity:
    u = current_user_optional(request)
    if u:
        return u
    next_url = str(request.url.path)
    if request.url.query:
        next_url += "?" + request.url.query
    loc = "/login" if next_url == "/" else f"/login?next={quote(next_url, safe='/')}"
    raise HTTPException(status_code=303, headers={"Location": loc})

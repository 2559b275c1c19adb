# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from taskboard.auth.models import Identity
from taskboard.auth.passwords import make_hasher
from taskboard.auth.session import SessionCookie, SessionStore
from taskboard.auth.users import CredentialStore
from taskboard.config import TASKS_COLLECTION, USERS_COLLECTION, Settings, load_settings
from taskboard.errors import (
    AlreadyExists,
    BadCredential,
    InvalidInput,
    NotFound,
    NotOwnedOrMissing,
    StoreUnavailable,
)
from taskboard.infra.store import connect
from taskboard.permissions import (
    current_user_optional,
    require_user,
    safe_next,
    session_token_from_request,
)
from taskboard.services.task_service import TaskService

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

LOGIN_FAILED = "Invalid email or password."
EMAIL_TAKEN = "Email already registered!"
NOT_YOURS = "This task does not exist or belongs to another user."
STORE_DOWN = "The task database is unavailable right now. Please try again later."


@asynccontextmanager
async def _lifespan(app: FastAPI):
    settings = app.state.settings or load_settings()
    app.state.settings = settings
    app.state.session_cookie = SessionCookie(settings.session_secret, max_age=settings.session_max_age)
    app.state.sessions.max_age = settings.session_max_age
    app.state.hasher = make_hasher(settings.hash_time_cost, settings.hash_memory_cost)

    client = None
    if app.state.db is None:
        # StoreUnavailable propagates: no traffic without a database.
        client, app.state.db = await connect(settings)
    logger.info("Taskboard started (db=%s)", settings.db_name)
    try:
        yield
    finally:
        if client is not None:
            client.close()
            app.state.db = None
        logger.info("Taskboard stopped")


def _render(request: Request, template_name: str, ctx: Optional[dict] = None, status_code: int = 200):
    """TemplateResponse wrapper injecting the current user."""
    base_ctx = {"current_user": getattr(request.state, "user", None)}
    merged = {**base_ctx, **(ctx or {})}
    return templates.TemplateResponse(request, template_name, merged, status_code=status_code)


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=303)


def get_credentials(request: Request) -> CredentialStore:
    return CredentialStore(request.app.state.db[USERS_COLLECTION], request.app.state.hasher)


def get_tasks(request: Request) -> TaskService:
    return TaskService(request.app.state.db[TASKS_COLLECTION])


def create_app(settings: Optional[Settings] = None, database=None) -> FastAPI:
    """Build the application.

    ``settings`` defaults to the environment (read at startup). ``database``
    replaces the MongoDB connection, e.g. with an in-memory double in tests.
    """
    app = FastAPI(lifespan=_lifespan)
    app.state.settings = settings
    app.state.db = database
    app.state.sessions = SessionStore()

    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

    @app.middleware("http")
    async def _auth_middleware(request: Request, call_next):
        request.state.user = current_user_optional(request)
        return await call_next(request)

    @app.exception_handler(NotOwnedOrMissing)
    async def _not_owned(request: Request, exc: NotOwnedOrMissing):
        return _render(request, "error.html", {"error": NOT_YOURS}, status_code=404)

    @app.exception_handler(StoreUnavailable)
    async def _store_down(request: Request, exc: StoreUnavailable):
        logger.error("Request %s %s failed: %s", request.method, request.url.path, exc)
        return _render(request, "error.html", {"error": STORE_DOWN}, status_code=503)

    # ------------------ Auth routes ------------------

    @app.get("/login", response_class=HTMLResponse)
    def login_get(request: Request, next: str = "/", registered: int = 0):
        if getattr(request.state, "user", None):
            return _redirect(safe_next(next))
        return _render(request, "login.html", {"next": next, "error": "", "email": "", "registered": bool(registered)})

    @app.post("/login")
    async def login_post(
        request: Request,
        email: str = Form(""),
        password: str = Form(""),
        next: str = Form("/"),
        credentials: CredentialStore = Depends(get_credentials),
    ):
        try:
            identity = await credentials.authenticate(email, password)
        except (NotFound, BadCredential) as e:
            reason = "unknown email" if isinstance(e, NotFound) else "wrong password"
            logger.info("Login failed for %r: %s", email, reason)
            return _render(request, "login.html", {"next": next, "error": LOGIN_FAILED, "email": email, "registered": False})

        sessions: SessionStore = request.app.state.sessions
        old = session_token_from_request(request)
        if old:
            sessions.destroy(old)
        token = sessions.create(identity)
        logger.info("User %s logged in", identity.email)

        settings: Settings = request.app.state.settings
        resp = _redirect(safe_next(next))
        resp.set_cookie(
            settings.cookie_name,
            request.app.state.session_cookie.sign(token),
            max_age=settings.session_max_age,
            **settings.cookie_settings(),
        )
        return resp

    @app.get("/register", response_class=HTMLResponse)
    def register_get(request: Request):
        return _render(request, "register.html", {"error": "", "name": "", "email": ""})

    @app.post("/register")
    async def register_post(
        request: Request,
        name: str = Form(""),
        email: str = Form(""),
        password: str = Form(""),
        credentials: CredentialStore = Depends(get_credentials),
    ):
        try:
            await credentials.register(name, email, password)
        except (InvalidInput, AlreadyExists) as e:
            error = EMAIL_TAKEN if isinstance(e, AlreadyExists) else str(e)
            return _render(request, "register.html", {"error": error, "name": name, "email": email})
        # Registering does not log the user in.
        return _redirect("/login?registered=1")

    @app.get("/logout")
    def logout(request: Request):
        token = session_token_from_request(request)
        if token:
            request.app.state.sessions.destroy(token)
        user = getattr(request.state, "user", None)
        if user:
            logger.info("User %s logged out", user.email)
        resp = _redirect("/login")
        resp.delete_cookie(request.app.state.settings.cookie_name)
        return resp

    # ------------------ Task routes ------------------

    @app.get("/", response_class=HTMLResponse)
    async def task_list(
        request: Request,
        user: Identity = Depends(require_user),
        tasks: TaskService = Depends(get_tasks),
    ):
        return _render(request, "list.html", {"tasks": await tasks.list_all()})

    @app.get("/add", response_class=HTMLResponse)
    def add_get(request: Request, success: Optional[str] = None, user: Identity = Depends(require_user)):
        return _render(request, "add.html", {"success": success})

    @app.post("/add")
    async def add_post(
        request: Request,
        title: str = Form(""),
        description: str = Form(""),
        user: Identity = Depends(require_user),
        tasks: TaskService = Depends(get_tasks),
    ):
        try:
            await tasks.create(user, title, description)
        except StoreUnavailable as e:
            logger.error("Could not add task for %s: %s", user.email, e)
            return _redirect("/add?success=0")
        return _redirect("/add?success=1")

    @app.get("/delete/{task_id}")
    async def delete_task(
        task_id: str,
        user: Identity = Depends(require_user),
        tasks: TaskService = Depends(get_tasks),
    ):
        await tasks.delete_owned(task_id, user)
        return _redirect("/")

    @app.get("/update/{task_id}", response_class=HTMLResponse)
    async def update_get(
        request: Request,
        task_id: str,
        user: Identity = Depends(require_user),
        tasks: TaskService = Depends(get_tasks),
    ):
        task = await tasks.find_owned(task_id, user)
        if task is None:
            raise NotOwnedOrMissing(task_id)
        return _render(request, "update.html", {"task": task})

    @app.post("/update/{task_id}")
    async def update_post(
        task_id: str,
        title: str = Form(""),
        description: str = Form(""),
        user: Identity = Depends(require_user),
        tasks: TaskService = Depends(get_tasks),
    ):
        await tasks.update_owned(task_id, user, title, description)
        return _redirect("/")

    return app


app = create_app()

"""HTTP endpoints — binds plaintext routes to pair storage operations.

Routes:
    GET    /                 index page
    GET    /{user}           names of every pair stored for a user
    GET    /{user}/{name}    value of a pair
    PUT    /{user}/{name}    set a pair from the request body (POST is an alias)
    DELETE /{user}/{name}    delete a pair

User identifiers may not contain ":", the key separator; such requests get a
400 client error so no two users ever share a storage key.

Every response body, including framework errors and unhandled exceptions,
goes through :mod:`gesedels.responses`.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from gesedels._internal.observability import setup_logging
from gesedels.config import Settings, get_settings
from gesedels.exceptions import InvalidUserError, StoreError
from gesedels.pairs import delete_pair, get_pair, list_pairs, set_pair
from gesedels.responses import write_error, write_failure, write_http
from gesedels.stores import Database, open_database

logger = logging.getLogger(__name__)


def get_database(request: Request) -> Database:
    return request.app.state.database


def check_user(user: str) -> str:
    """Return *user*, rejecting identifiers that would share another user's keys."""
    if ":" in user:
        raise InvalidUserError(user)
    return user


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Build the application.

    Parameters:
        settings: Configuration to use.  Defaults to :func:`get_settings`.
        database: Open database to serve.  The caller keeps ownership of an
                  injected database; otherwise one is opened from
                  ``settings.path`` at startup and closed at shutdown.
    """
    settings = settings or get_settings()
    owns_database = database is None

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        setup_logging(settings.log_level, settings.log_format)
        if owns_database:
            app.state.database = open_database(settings.path)
        logger.info("gesedels serving database %s", settings.path if owns_database else "<injected>")
        try:
            yield
        finally:
            if owns_database:
                await app.state.database.close()
            logger.info("gesedels shutting down")

    app = FastAPI(title="gesedels", lifespan=lifespan)
    if database is not None:
        app.state.database = database

    _register_routes(app)
    _register_error_handlers(app)
    return app


# ─── ROUTES ──────────────────────────────────────────────────────


def _register_routes(app: FastAPI) -> None:
    @app.get("/")
    async def get_index() -> PlainTextResponse:
        return write_http(status.HTTP_200_OK, "Hello.")

    @app.get("/{user}")
    async def get_user(user: str, request: Request) -> PlainTextResponse:
        check_user(user)
        names = await list_pairs(get_database(request), user)
        return write_http(status.HTTP_200_OK, "%s", "\n".join(names))

    @app.get("/{user}/{name}")
    async def get_user_pair(user: str, name: str, request: Request) -> PlainTextResponse:
        check_user(user)
        value, ok = await get_pair(get_database(request), user, name)
        if not ok:
            return write_failure(
                status.HTTP_404_NOT_FOUND, "pair %s/%s does not exist", user, name
            )
        # Stored values already end in a newline.
        return write_http(status.HTTP_200_OK, "%s", value.removesuffix("\n"))

    @app.api_route("/{user}/{name}", methods=["PUT", "POST"])
    async def set_user_pair(user: str, name: str, request: Request) -> PlainTextResponse:
        check_user(user)
        body = await request.body()
        try:
            value = body.decode("utf-8")
        except UnicodeDecodeError:
            return write_failure(status.HTTP_400_BAD_REQUEST, "value is not valid UTF-8 text")

        await set_pair(get_database(request), user, name, value)
        return write_http(status.HTTP_200_OK, "ok")

    @app.delete("/{user}/{name}")
    async def delete_user_pair(user: str, name: str, request: Request) -> PlainTextResponse:
        check_user(user)
        await delete_pair(get_database(request), user, name)
        return write_http(status.HTTP_200_OK, "ok")


# ─── ERROR HANDLERS ──────────────────────────────────────────────


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
        """Unknown routes, wrong methods and other framework-level failures."""
        logger.warning(
            f"HTTP {exc.status_code} on {request.method} {request.url.path}",
            extra={"method": request.method, "path": request.url.path, "status": exc.status_code},
        )
        response = write_failure(exc.status_code, "%s", str(exc.detail).lower())
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(InvalidUserError)
    async def invalid_user_handler(request: Request, exc: InvalidUserError) -> PlainTextResponse:
        return write_failure(status.HTTP_400_BAD_REQUEST, "user %s must not contain ':'", exc.user)

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError) -> PlainTextResponse:
        logger.error(
            f"StoreError on {request.method} {request.url.path}: {exc}",
            extra={"method": request.method, "path": request.url.path, "operation": exc.operation},
        )
        return write_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "database error")

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> PlainTextResponse:
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}: {exc}",
            exc_info=True,
            extra={"method": request.method, "path": request.url.path},
        )
        return write_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal error")

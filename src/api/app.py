"""FastAPI application factory."""

import base64
import logging
import secrets
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from config.settings import settings
from src.api.routes import router
from src.calculators.errors import (
    RuleTableNotFoundError,
    StoreUnavailableError,
    TaxEngineError,
    TaxValidationError,
)
from src.db.rule_store import PostgresRuleTableStore, RuleTableStore, StaticRuleTableStore
from src.db.session import close_pool, get_pool
from src.engine import TaxEngine
from src.rule_cache import RuleTableCache

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: pick the rule store, build the engine. Shutdown: close pool."""
    logging.basicConfig(level=settings.log_level)
    logger.info("Starting up with %s rule store...", settings.rule_store)

    store: RuleTableStore
    if settings.rule_store == "postgres":
        pool = await get_pool()
        app.state.pool = pool
        store = PostgresRuleTableStore(pool)
    else:
        app.state.pool = None
        store = StaticRuleTableStore()
    app.state.engine = TaxEngine(RuleTableCache(store))

    yield

    logger.info("Shutting down...")
    await close_pool()


UNAUTHORIZED = Response(
    content="Unauthorized",
    status_code=401,
    headers={"WWW-Authenticate": "Basic"},
)


class BasicAuthMiddleware(BaseHTTPMiddleware):
    """Enforce HTTP Basic Auth on all requests."""

    def __init__(self, app, username: str, password: str) -> None:  # type: ignore[no-untyped-def]
        super().__init__(app)
        self._username = username.encode()
        self._password = password.encode()

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        auth = request.headers.get("Authorization")
        if auth and auth.startswith("Basic "):
            try:
                decoded = base64.b64decode(auth[6:]).decode()
                username, password = decoded.split(":", 1)
            except Exception:
                return UNAUTHORIZED
            if secrets.compare_digest(username.encode(), self._username) and secrets.compare_digest(
                password.encode(), self._password
            ):
                return await call_next(request)
        return UNAUTHORIZED


_STATUS_CODES: dict[type[TaxEngineError], int] = {
    TaxValidationError: 400,
    RuleTableNotFoundError: 404,
    StoreUnavailableError: 503,
}


async def tax_engine_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map engine errors to HTTP status codes."""
    status_code = next(
        (code for cls, code in _STATUS_CODES.items() if isinstance(exc, cls)), 500
    )
    if status_code >= 500:
        logger.warning("Tax engine failure on %s: %s", request.url.path, exc)
    return JSONResponse({"error": str(exc)}, status_code=status_code)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(title="AU Tax Calculator", lifespan=lifespan)
    if settings.auth_enabled:
        app.add_middleware(
            BasicAuthMiddleware,
            username=settings.auth_username,
            password=settings.auth_password,
        )
    app.add_exception_handler(TaxEngineError, tax_engine_error_handler)
    app.include_router(router)
    return app

"""FastAPI application factory. No business logic; only wiring, middleware and error rendering."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import Engine
from starlette.middleware.trustedhost import TrustedHostMiddleware

from savekeep import __version__
from savekeep.api.v1 import router as v1_router
from savekeep.core.config import Settings, get_settings
from savekeep.core.database import create_db_engine, create_session_factory
from savekeep.core.errors import ErrorClass, ErrorKind, ServiceError
from savekeep.core.security import PasswordHasher
from savekeep.core.tokens import TokenService

logger = logging.getLogger(__name__)


def error_response(exc: ServiceError) -> JSONResponse:
    headers = None
    if exc.error_class is ErrorClass.AUTHENTICATION:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers=headers,
    )


async def service_error_handler(_request: Request, exc: ServiceError) -> JSONResponse:
    return error_response(exc)


async def request_validation_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed query strings are PARAMETER errors; anything else is a bad payload."""
    locations = {err.get("loc", ("body",))[0] for err in exc.errors()}
    kind = ErrorKind.PARAMETER if locations == {"query"} else ErrorKind.PAYLOAD
    return error_response(ServiceError(kind))


def create_app(settings: Settings, engine: Engine | None = None) -> FastAPI:
    """
    Build the application from an explicit settings object.

    Settings, the DB session factory, the token service and the password
    hasher live on app.state; dependencies read them from there. Pass engine
    to reuse an existing one (tests use SQLite).
    """
    db_engine = engine if engine is not None else create_db_engine(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("SaveKeep starting (env=%s, domain=%s)", settings.APP_ENV, settings.SERVICE_DOMAIN)
        try:
            yield
        finally:
            app.state.hasher.shutdown()
            if engine is None:
                db_engine.dispose()

    app = FastAPI(
        title="SaveKeep API",
        version=__version__,
        docs_url="/docs" if settings.APP_ENV == "dev" else None,
        redoc_url="/redoc" if settings.APP_ENV == "dev" else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = db_engine
    app.state.session_factory = create_session_factory(db_engine)
    app.state.tokens = TokenService.from_settings(settings)
    app.state.hasher = PasswordHasher.from_settings(settings)

    if settings.APP_ENV == "prod":
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=[settings.SERVICE_DOMAIN])

    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(v1_router, prefix=settings.API_V1_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "SaveKeep API"}

    return app


def get_app() -> FastAPI:
    """ASGI factory for uvicorn: `uvicorn savekeep.main:get_app --factory`."""
    load_dotenv()
    return create_app(get_settings())

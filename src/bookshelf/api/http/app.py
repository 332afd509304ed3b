"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.bookshelf import __version__
from src.bookshelf.api.http.app_data import ApplicationDependencies
from src.bookshelf.api.http.routers.books import router as books_router
from src.bookshelf.api.http.routers.health import router as health_router
from src.bookshelf.api.utils.app_startup import configure_logging
from src.bookshelf.core.exceptions import StorageError
from src.bookshelf.core.models import Envelope
from src.bookshelf.core.services import DbSessionService, StorageGateway
from src.bookshelf.runtime.context import get_config

__all__ = ["app", "create_app", "startup", "shutdown"]


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        return response


def format_validation_errors(exc: RequestValidationError) -> str:
    """Flatten FastAPI validation errors into a single parser message."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "invalid request body"


# --- Lifecycle hooks ---
async def startup(app: FastAPI, storage_gateway: StorageGateway | None = None) -> None:
    """Build the storage gateway, initialize the schema and seed when enabled.

    Any storage failure here is fatal: it propagates out of the lifespan and
    the server refuses to start.
    """
    config = get_config()
    logger.info("Starting up application in {} environment", config.app.environment)

    # Only a gateway built here is closed again on shutdown
    app.state.owns_storage_gateway = storage_gateway is None
    if storage_gateway is None:
        storage_gateway = StorageGateway(DbSessionService(config))

    try:
        storage_gateway.initialize_schema()
        if config.seed.enabled:
            storage_gateway.seed()
    except StorageError:
        logger.critical("Could not prepare the database; aborting startup")
        raise

    app.state.app_dependencies = ApplicationDependencies(
        database_service=storage_gateway.database_service,
        storage_gateway=storage_gateway,
    )


async def shutdown(app: FastAPI) -> None:
    logger.info("Shutting down application")
    app_dependencies: ApplicationDependencies | None = getattr(
        app.state, "app_dependencies", None
    )
    owns_gateway = getattr(app.state, "owns_storage_gateway", False)
    if app_dependencies is not None and owns_gateway:
        app_dependencies.storage_gateway.close()


def create_app(storage_gateway: StorageGateway | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        storage_gateway: Pre-built gateway to use instead of one built from the
            configuration at startup (tests pass an in-memory one).
    """
    config = get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging()
        await startup(app, storage_gateway)
        try:
            yield
        finally:
            await shutdown(app)

    app = FastAPI(
        title="Bookshelf API",
        version=__version__,
        lifespan=lifespan,
        docs_url=None if config.app.environment == "production" else "/docs",
        redoc_url=None if config.app.environment == "production" else "/redoc",
    )

    app.add_middleware(SecurityHeadersMiddleware)

    # --- CORS configuration ---
    if config.app.environment == "production" and "*" in config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )

    # --- Request logging middleware ---
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        client_ip = request.client.host if request.client else "unknown"

        start = time.perf_counter()
        with logger.contextualize(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_ip=client_ip,
        ):
            try:
                logger.info("request.start")
                response = await call_next(request)

                duration_ms = (time.perf_counter() - start) * 1000
                logger.bind(
                    status_code=response.status_code,
                    duration_ms=round(duration_ms, 1),
                ).info("request.end")

                response.headers.setdefault("X-Request-ID", request_id)
                return response

            except Exception as exc:
                duration_ms = (time.perf_counter() - start) * 1000
                logger.bind(
                    status_code=500,
                    duration_ms=round(duration_ms, 1),
                    error_type=type(exc).__name__,
                ).exception("request.error")
                return JSONResponse(
                    status_code=500,
                    content={"error": "internal server error", "request_id": request_id},
                    headers={"X-Request-ID": request_id},
                )

    # --- Malformed bodies ---
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        message = format_validation_errors(exc)
        logger.bind(status_code=422).warning("request.validation_error: {}", message)
        return JSONResponse(
            status_code=422, content=Envelope(error=message).to_content()
        )

    # --- Router registration ---
    app.include_router(health_router)
    app.include_router(books_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host=get_config().app.host,
        port=get_config().app.port,
        access_log=False,  # Access logging happens in the middleware
    )

# parking_registry/main.py
"""
FastAPI application entry point.
Builds the app around an explicitly opened RecordStore, registers the
error-to-envelope handlers and all routers.

Run with: uvicorn parking_registry.main:app --port 5000
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from parking_registry import __version__
from parking_registry.config import Settings, settings as default_settings
from parking_registry.errors import RegistryError
from parking_registry.routers import health, statistics, vehicles
from parking_registry.schemas.envelope import failure
from parking_registry.services.registry_service import RegistryService
from parking_registry.store import RecordStore
from parking_registry.utils.logger import get_logger

logger = get_logger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("🚀 Parking Registry starting up...")
        store = RecordStore(settings.DATABASE_URL, seed_example_data=settings.SEED_EXAMPLE_DATA)
        store.open()
        app.state.store = store
        app.state.registry = RegistryService(store, capacity=settings.MAX_CAPACITY)
        logger.info(f"🅿️  Capacity: {settings.MAX_CAPACITY} vehicles")
        logger.info(f"🌐 Listening on http://{settings.BACKEND_IP}:{settings.BACKEND_PORT}")
        logger.info("📖 API docs at /docs")
        try:
            yield
        finally:
            logger.info("🛑 Parking Registry shutting down...")
            store.close()

    app = FastAPI(
        title="Parking Registry API",
        description="Vehicle entry/exit registry for a single parking lot.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # ── CORS (allow a browser client on the same LAN to call the API) ────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Request Timing Middleware ────────────────────────────────────────────
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        duration = round((time.time() - start) * 1000, 2)
        logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
        return response

    # ── Error → envelope translation ─────────────────────────────────────────
    @app.exception_handler(RegistryError)
    async def registry_error_handler(request: Request, exc: RegistryError):
        return JSONResponse(status_code=exc.status_code, content=failure(exc.message))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        detail = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=failure("Invalid request", error=detail),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Unmatched path or method: same generic answer for both
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=failure("Route not found"))
        return JSONResponse(status_code=exc.status_code, content=failure(str(exc.detail)))

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"Storage failure on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=failure("Internal server error", error=str(exc)),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=failure("Internal server error", error=str(exc)),
        )

    # ── Routers ──────────────────────────────────────────────────────────────
    app.include_router(vehicles.router,   prefix="/api", tags=["🚗 Vehicles"])
    app.include_router(statistics.router, prefix="/api", tags=["📊 Statistics"])
    app.include_router(health.router,     prefix="/api", tags=["💚 Health"])

    return app


app = create_app()

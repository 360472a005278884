"""FastAPI application factory."""
from __future__ import annotations
from contextlib import asynccontextmanager
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from ..config import Settings
from ..engine.pipeline import VatCalculationService
from ..reference.store import get_default_store
from ..storage.database import init_db, close_db, AsyncSessionLocal
from ..storage.repositories import load_reference_store
from ..utils.logging import setup_logging
from .middleware import RequestLoggingMiddleware
from .routes import health, reference, vat

logger = structlog.get_logger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        if settings.reference_source == "database":
            init_db(settings.database_url.get_secret_value())
            async with AsyncSessionLocal() as session:
                store = await load_reference_store(session)
            app.state.reference_store = store
            app.state.vat_service = VatCalculationService(store, settings.default_currency)
            logger.info("reference_data_loaded", source="database",
                        countries=len(store.list_countries()), categories=len(store.list_categories()))
        yield
        # Shutdown
        await close_db()

    app = FastAPI(
        title="VAT Engine API",
        description="EU VAT rule determination and invoice calculation",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = [
            {
                "field": ".".join(str(part) for part in error["loc"] if part != "body"),
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
        logger.info("request_invalid", path=request.url.path, errors=len(details))
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": "Invalid request", "details": details},
        )

    # Store settings and the seed-backed store in app state; the lifespan
    # swaps in database-backed data when configured.
    app.state.settings = settings
    app.state.reference_store = get_default_store()
    app.state.vat_service = VatCalculationService(app.state.reference_store, settings.default_currency)

    # Register routes
    app.include_router(health.router, tags=["health"])
    app.include_router(vat.router, prefix="/vat", tags=["vat"])
    app.include_router(reference.router, prefix="/vat", tags=["reference"])

    return app

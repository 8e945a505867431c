"""FastAPI application factory"""

from contextlib import asynccontextmanager
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from balance_gateway.api.middleware import RequestIDMiddleware, RequestLoggingMiddleware, MetricsMiddleware
from balance_gateway.api.v1 import accounts, customers, balances
from balance_gateway.infrastructure.database.session import Database
from balance_gateway.infrastructure.observability.logging import setup_logging
from balance_gateway.config import Settings, settings as default_settings


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """Create and configure FastAPI application"""
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.service_name)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.create_tables_on_startup:
            app.state.database.create_tables()
        yield
        app.state.database.dispose()

    app = FastAPI(
        title="Balance Gateway",
        description="Account, customer and balance query service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database or Database.from_settings(settings)

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(accounts.router, prefix="/v1", tags=["accounts"])
    app.include_router(customers.router, prefix="/v1", tags=["customers"])
    app.include_router(balances.router, prefix="/v1", tags=["balances"])

    return app


def run() -> None:
    """Serve the API with uvicorn on the configured host and port"""
    uvicorn.run(
        create_app(),
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()

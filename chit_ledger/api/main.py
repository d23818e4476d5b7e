"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from chit_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from chit_ledger.api.v1 import payments, cycles
from chit_ledger.infrastructure.observability.logging import setup_logging
from chit_ledger.config import settings

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Chit Ledger",
        description="Payment allocation and cycle scheduling for chit funds",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name, "store": settings.store_backend}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(payments.router, prefix="/v1", tags=["payments"])
    app.include_router(cycles.router, prefix="/v1", tags=["cycles"])

    return app


app = create_app()

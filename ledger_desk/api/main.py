"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from ledger_desk.api.middleware import RequestIDMiddleware, MetricsMiddleware
from ledger_desk.api.v1 import clients, invoices, ledger, staff
from ledger_desk.infrastructure.observability.logging import setup_logging
from ledger_desk.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Ledger Desk",
        description="Ledger summaries and invoice documents for the admin dashboard",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Last added = first executed
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(ledger.router, prefix="/v1", tags=["ledger"])
    app.include_router(invoices.router, prefix="/v1", tags=["invoices"])
    app.include_router(clients.router, prefix="/v1", tags=["clients"])
    app.include_router(staff.router, prefix="/v1", tags=["staff"])

    return app


app = create_app()

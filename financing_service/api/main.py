"""FastAPI application factory"""

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from financing_service.api.dependencies import get_request_id
from financing_service.api.middleware import RequestIDMiddleware, MetricsMiddleware
from financing_service.api.v1 import schedule, simulation, status
from financing_service.infrastructure.observability.logging import setup_logging
from financing_service.config import settings

# Setup structured logging
setup_logging(settings.log_level)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logging.error(f"Unexpected error: {exc}", extra={"request_id": get_request_id(request)})
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Financing Service",
        description="SAC/Price amortization tables, balance reconciliation and early payment simulation",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(schedule.router, prefix=settings.api_prefix, tags=["schedules"])
    app.include_router(status.router, prefix=settings.api_prefix, tags=["status"])
    app.include_router(simulation.router, prefix=settings.api_prefix, tags=["simulations"])

    return app


app = create_app()

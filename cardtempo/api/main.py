"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from cardtempo.api.middleware import RequestIDMiddleware, MetricsMiddleware
from cardtempo.api.v1 import optimize, priority, reminders, scenarios
from cardtempo.infrastructure.observability.logging import setup_logging
from cardtempo.infrastructure.database.models import Base
from cardtempo.infrastructure.database.session import engine
from cardtempo.config import settings

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="CardTempo",
        description="Credit card payment timing and utilization optimization service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(optimize.router, prefix="/v1", tags=["optimization"])
    app.include_router(scenarios.router, prefix="/v1", tags=["scenarios"])
    app.include_router(priority.router, prefix="/v1", tags=["priority"])
    app.include_router(reminders.router, prefix="/v1", tags=["reminders"])

    return app


app = create_app()

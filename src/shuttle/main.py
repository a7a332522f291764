"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import health, stations, trip
from .config import settings
from .services.routing.service import TripRouteService


def create_app(service: TripRouteService | None = None) -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        trip_service = service or TripRouteService()
        app.state.trip_service = trip_service
        # start() is bounded by the OSRM timeout and always ends with a displayable route.
        await trip_service.start()
        try:
            yield
        finally:
            await trip_service.dispose()
            app.state.trip_service = None

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Root endpoint for diagnostics
    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "route": f"{settings.api_prefix}/trip/route",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(stations.router, prefix=settings.api_prefix)
    app.include_router(trip.router, prefix=settings.api_prefix)
    return app


app = create_app()

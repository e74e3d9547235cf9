"""FastAPI application factory for the dispatch service."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ride_dispatch.api.models import HealthResponse
from ride_dispatch.api.routes import drivers, fares, notifications, ride_requests, rides
from ride_dispatch.booking import BookingService
from ride_dispatch.core.clock import Clock, SystemClock
from ride_dispatch.core.exceptions import InvalidTransitionError, NotFoundError, StorageError
from ride_dispatch.inbox import NotificationInbox
from ride_dispatch.lifecycle import RideLifecycle
from ride_dispatch.matching import MatchingServer
from ride_dispatch.settings import Settings, get_settings
from ride_dispatch.store import DispatchStore
from ride_dispatch.tracking import LocationTracker

logger = logging.getLogger(__name__)


def create_app(
    store: DispatchStore,
    settings: Settings | None = None,
    clock: Clock | None = None,
) -> FastAPI:
    """Create FastAPI application with injected dependencies.

    Args:
        store: Storage backend shared by every service
        settings: Loaded from the environment when omitted
        clock: Time source, injectable for tests
    """
    settings = settings or get_settings()
    clock = clock or SystemClock()

    app = FastAPI(
        title="Ride Dispatch API",
        version="1.0.0",
        description="Driver matching and ride lifecycle for on-demand transport",
    )

    matching_server = MatchingServer(store, settings.matching, clock)

    # Set dependencies immediately so they're available for testing
    app.state.settings = settings
    app.state.store = store
    app.state.matching_server = matching_server
    app.state.booking_service = BookingService(store, matching_server, clock)
    app.state.lifecycle = RideLifecycle(store, clock, settings.matching)
    app.state.location_tracker = LocationTracker(store, clock)
    app.state.notification_inbox = NotificationInbox(store)

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition_handler(
        request: Request, exc: InvalidTransitionError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=409,
            content={
                "detail": exc.message,
                "action": exc.action,
                "current_state": exc.current_state,
            },
        )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": exc.message})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        logger.error(f"Storage unavailable for {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=503, content={"detail": "Storage unavailable"})

    app.include_router(ride_requests.router, prefix="/ride-requests", tags=["ride-requests"])
    app.include_router(rides.router, prefix="/rides", tags=["rides"])
    app.include_router(drivers.router, prefix="/drivers", tags=["drivers"])
    app.include_router(fares.router, prefix="/fares", tags=["fares"])
    app.include_router(notifications.router, tags=["notifications"])

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint for monitoring (unauthenticated for infrastructure)."""
        return HealthResponse()

    return app

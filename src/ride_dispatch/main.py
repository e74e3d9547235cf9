"""
Ride Dispatch - Service Entry Point

Loads settings, configures logging and the database, then serves the
dispatch API with uvicorn.
"""

import logging

import uvicorn

from ride_dispatch.api import create_app
from ride_dispatch.db.database import init_database
from ride_dispatch.db.sql_store import SqlDispatchStore
from ride_dispatch.dispatch_logging import setup_logging
from ride_dispatch.settings import get_settings

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    setup_logging(settings.logging)

    if not settings.api.key:
        logger.warning("API_KEY is not set; authenticated routes will answer 500")

    session_factory = init_database(settings.database.url, echo=settings.database.echo)
    store = SqlDispatchStore(session_factory)
    logger.info(f"Database initialized at {settings.database.url}")

    app = create_app(store, settings)

    logger.info(
        f"Starting dispatch service on {settings.api.host}:{settings.api.port} "
        f"(radius {settings.matching.search_radius_km}km, "
        f"claim_drivers={settings.matching.claim_drivers})"
    )
    uvicorn.run(
        app,
        host=settings.api.host,
        port=settings.api.port,
        log_level=settings.logging.level.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    main()

"""
Soil Sensor API
===============
FastAPI application that stores sensor readings sent by garden devices.

ARCHITECTURE:
    [ESPHome / ESP32 devices] --HTTP POST /create--> [This API] ---> [MySQL table]

    TLS, if wanted, is terminated by a reverse proxy in front of this API.

HOW TO RUN:
    pip install -e .

    # First launch writes config.yaml with defaults and exits
    soil-sensor-api

    # Edit config.yaml (database credentials, table, espkey), then
    soil-sensor-api

    # Or with uvicorn directly (reads config.yaml from the working directory)
    uvicorn soil_sensor_api.main:create_app --factory --port 15000

ENVIRONMENT:
    SOIL_SENSOR_CONFIG  Path to the config file (default: ./config.yaml)
    LOG_LEVEL           Logging level (default: INFO)

Author: Soil Sensor API Team
"""

import logging
import os
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from soil_sensor_api.context import AppContext
from soil_sensor_api.routers import readings_router, get_context, method_not_allowed_handler
from soil_sensor_api.services import (
    ConfigError,
    ReadingStore,
    StorageError,
    load_settings,
)

logger = logging.getLogger(__name__)


# =============================================================================
# LOGGING
# =============================================================================

def configure_logging() -> None:
    """Send log records to stderr; level comes from LOG_LEVEL."""
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format='[%(asctime)s] %(levelname)s %(name)s: %(message)s',
        datefmt='%H:%M:%S',
        handlers=[logging.StreamHandler(sys.stderr)]
    )


# =============================================================================
# CONTEXT
# =============================================================================

def build_context() -> AppContext:
    """
    Load config.yaml and open the database pool.

    Raises:
        ConfigError: Config missing (a default one is written), unreadable or invalid
        StorageError: The database engine could not be created
    """
    settings = load_settings()
    store = ReadingStore.from_settings(settings)
    return AppContext(settings=settings, store=store)


# =============================================================================
# APPLICATION LIFESPAN
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    STARTUP:  print what we are about to serve
    SHUTDOWN: close the database pool
    """
    context: AppContext = app.state.context
    settings = context.settings

    print("=" * 60)
    print("Soil Sensor API - Started http api server")
    print("=" * 60)
    print(f"   Database: {settings.db_address}:{settings.db_port}/{settings.db_name}")
    print(f"   Table:    {settings.db_table}")
    print("   Endpoint: POST /create")
    if settings.legacy_status_codes:
        print("   Legacy status codes: every response is HTTP 200")
    print("=" * 60)

    yield

    print("Shutting down...")
    context.store.dispose()
    print("Shutdown complete")


# =============================================================================
# CREATE FASTAPI APPLICATION
# =============================================================================

def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """
    Build the FastAPI app around an application context.

    Args:
        context: Settings + store to serve with. When omitted, they are
            built from config.yaml (this is what `uvicorn --factory` uses).
    """
    if context is None:
        context = build_context()

    app = FastAPI(
        title="Soil Sensor API",
        description="Stores temperature / humidity readings posted by garden sensors.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.context = context

    app.include_router(readings_router)
    app.add_exception_handler(StarletteHTTPException, method_not_allowed_handler)

    @app.get(
        "/health",
        summary="Health Check",
        description="Check if the API is running and the database answers."
    )
    def health(ctx: AppContext = Depends(get_context)):
        """Health check endpoint."""
        database_ok = ctx.store.ping()
        return {
            "status": "healthy" if database_ok else "degraded",
            "database": database_ok,
            "table": ctx.settings.db_table,
        }

    return app


# =============================================================================
# ENTRY POINT
# =============================================================================

def main() -> None:
    """Console entry point: load config, open the database, serve forever."""
    load_dotenv()
    configure_logging()
    logger.info("Starting Soil Sensor API")

    try:
        context = build_context()
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)
    except StorageError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info("MySQL connection pool ready")

    # uvicorn exits with status 1 itself when it cannot bind the port
    uvicorn.run(
        create_app(context),
        host="0.0.0.0",
        port=context.settings.http_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()

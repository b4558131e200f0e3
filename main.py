"""
MealTrack FastAPI Application
Main entry point: application factory, lifespan and middleware wiring
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import uvicorn
from contextlib import asynccontextmanager
import anyio
from typing import Optional

from api.routes import users, meal_plans, meals, health
from domain.models import (
    create_db_engine,
    create_session_factory,
    init_database,
    dispose_engine,
)
from services.password import PasswordHasher

from app.config import Settings, settings as default_settings
from app.exceptions import AppError

from api.middleware import (
    RequestLoggingMiddleware,
    app_error_handler,
    validation_exception_handler,
    http_exception_handler,
    general_exception_handler,
)

# Setup logging with configured level and format
logging.basicConfig(
    level=getattr(logging, default_settings.log_level.upper()),
    format=default_settings.log_format,
)
_logger = logging.getLogger("mealtrack.main")


async def _init_schema(engine, config: Settings):
    """Create tables, retrying while the database is still coming up"""
    for attempt in range(1, config.db_init_attempts + 1):
        try:
            # Run blocking init in a thread to avoid blocking the event loop
            await anyio.to_thread.run_sync(init_database, engine)
            _logger.info("Database initialization succeeded")
            return
        except Exception as exc:
            _logger.warning(
                "Database init attempt %d/%d failed: %s",
                attempt,
                config.db_init_attempts,
                exc,
            )
            if attempt < config.db_init_attempts:
                await anyio.sleep(config.db_init_delay_sec)
            else:
                _logger.error(
                    "Database initialization failed after %d attempts", attempt
                )
                raise


def create_app(config: Optional[Settings] = None) -> FastAPI:
    """Build the application. The engine lives from startup until shutdown."""
    config = config or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _logger.info(f"Starting {config.app_name} in {config.environment.value} mode")

        engine = create_db_engine(config.database_url, echo=config.db_echo)
        try:
            if config.db_create_schema:
                await _init_schema(engine, config)

            app.state.engine = engine
            app.state.session_factory = create_session_factory(engine)
            app.state.password_hasher = PasswordHasher(config.pepper.get_secret_value())

            yield
        finally:
            _logger.info(f"Shutting down {config.app_name}")
            dispose_engine(engine)

    app = FastAPI(
        title=config.api_title,
        version=config.app_version,
        description=config.api_description,
        lifespan=lifespan,
        debug=config.debug,
        openapi_url=(
            f"{config.api_prefix}/openapi.json" if not config.is_production() else None
        ),
        docs_url=f"{config.api_prefix}/docs" if not config.is_production() else None,
        redoc_url=f"{config.api_prefix}/redoc" if not config.is_production() else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=config.cors_allow_credentials,
        allow_methods=config.cors_allow_methods,
        allow_headers=config.cors_allow_headers,
    )
    app.add_middleware(RequestLoggingMiddleware)

    # Centralized error responder
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(health.router)
    app.include_router(users.router, prefix=config.api_prefix)
    app.include_router(meal_plans.router, prefix=config.api_prefix)
    app.include_router(meals.router, prefix=config.api_prefix)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.is_development(),
        log_level=default_settings.log_level.lower(),
    )

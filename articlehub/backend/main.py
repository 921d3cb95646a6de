"""
FastAPI Application Entry Point.

Serves the Mini App API, health checks and the webhooks of both bots.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from articlehub.backend.api import health
from articlehub.backend.api.v1 import router as api_v1_router
from articlehub.backend.core.config import AppConfig, get_app_config, get_settings
from articlehub.backend.core.database import dispose_engine
from articlehub.backend.core.exception_handlers import register_exception_handlers
from articlehub.backend.core.logging import get_logger, setup_logging
from articlehub.backend.core.middleware import RequestContextMiddleware

logger = get_logger(__name__)

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    app_config = get_app_config()
    setup_logging(level=app_config.logging.level)

    if app_config.features.security_startup_checks_enabled:
        from articlehub.backend.core.startup_checks import run_startup_checks
        run_startup_checks()

    logger.info(
        "Application starting",
        extra={
            "app_name": app_config.application.name,
            "env": app_config.application.environment,
        },
    )

    await _register_webhooks(app_config)
    yield

    logger.info("Application shutting down")
    if app_config.features.admin_bot_enabled or app_config.features.support_bot_enabled:
        from articlehub.telegram.bot import close_bots
        await close_bots()
    await dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app_config = get_app_config()
    app_settings = app_config.application

    app = FastAPI(
        title=app_settings.name,
        description=app_settings.description,
        version=app_settings.version,
        docs_url="/docs" if app_settings.docs_enabled else None,
        redoc_url="/redoc" if app_settings.docs_enabled else None,
        lifespan=lifespan,
    )

    app.add_middleware(RequestContextMiddleware)

    cors_origins = app_settings.cors.origins
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=app_config.security.cors.allow_methods,
            allow_headers=app_config.security.cors.allow_headers,
        )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(api_v1_router, prefix=app_settings.api_prefix)

    _mount_bot_webhooks(app, app_config)

    return app


def _mount_bot_webhooks(app: FastAPI, app_config: AppConfig) -> None:
    """Mount the webhook endpoint of each enabled bot."""
    features = app_config.features
    telegram = app_config.application.telegram
    secret = get_settings().telegram_webhook_secret

    if not (features.admin_bot_enabled or features.support_bot_enabled):
        return

    from articlehub.telegram.bot import (
        get_admin_bot,
        get_admin_dispatcher,
        get_support_dispatcher,
        get_user_bot,
    )
    from articlehub.telegram.webhook import get_webhook_router

    try:
        if features.admin_bot_enabled:
            app.include_router(
                get_webhook_router(
                    get_admin_bot(), get_admin_dispatcher(), telegram.admin_webhook_path, secret
                )
            )
            logger.info("Admin bot webhook mounted", extra={"path": telegram.admin_webhook_path})

        if features.support_bot_enabled:
            app.include_router(
                get_webhook_router(
                    get_user_bot(), get_support_dispatcher(), telegram.support_webhook_path, secret
                )
            )
            logger.info(
                "Support bot webhook mounted", extra={"path": telegram.support_webhook_path}
            )

    except Exception as e:
        logger.error("Failed to mount bot webhooks", extra={"error": str(e)})
        raise


async def _register_webhooks(app_config: AppConfig) -> None:
    """Point Telegram at our webhooks when a public base URL is configured."""
    features = app_config.features
    telegram = app_config.application.telegram
    if not telegram.webhook_base_url:
        return

    from articlehub.telegram.bot import (
        get_admin_bot,
        get_admin_dispatcher,
        get_support_dispatcher,
        get_user_bot,
        setup_webhook,
    )
    from articlehub.telegram.webhook import get_webhook_url

    secret = get_settings().telegram_webhook_secret
    timeout = app_config.application.timeouts.external_api

    if features.admin_bot_enabled:
        await setup_webhook(
            get_admin_bot(),
            get_admin_dispatcher(),
            get_webhook_url(telegram.webhook_base_url, telegram.admin_webhook_path),
            secret,
            request_timeout=timeout,
        )
    if features.support_bot_enabled:
        await setup_webhook(
            get_user_bot(),
            get_support_dispatcher(),
            get_webhook_url(telegram.webhook_base_url, telegram.support_webhook_path),
            secret,
            request_timeout=timeout,
        )


def get_app() -> FastAPI:
    """
    Get the application instance (lazy initialization).

    This function creates the app on first call and caches it.
    Use this instead of importing `app` directly to avoid
    import-time configuration errors.
    """
    global _app
    if _app is None:
        _app = create_app()
    return _app


# For uvicorn: `uvicorn articlehub.backend.main:app`
def __getattr__(name: str) -> FastAPI:
    """Support lazy access to `app` for uvicorn compatibility."""
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

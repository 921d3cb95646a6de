"""
Startup Security Validation.

Checks security invariants before the application accepts traffic.
If any check fails, the application refuses to start with a clear
error message.

Called during FastAPI lifespan initialization.
"""

from articlehub.backend.core.config import AppConfig, Settings, get_app_config, get_settings
from articlehub.backend.core.logging import get_logger

logger = get_logger(__name__)


class StartupSecurityError(RuntimeError):
    """Raised when a startup security check fails."""


def run_startup_checks() -> None:
    """
    Validate all security invariants at startup.

    Raises:
        StartupSecurityError: If any check fails
    """
    app_config = get_app_config()
    settings = get_settings()
    environment = app_config.application.environment

    errors: list[str] = []

    _check_bot_secrets(settings, app_config, errors)
    _check_admin_routing(app_config, errors)
    _check_production_safety(app_config, environment == "production", errors)

    if errors:
        for error in errors:
            logger.error("Startup security check failed", extra={"check": error})
        raise StartupSecurityError(
            f"Startup blocked, {len(errors)} security check(s) failed:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    logger.info(
        "Startup security checks passed",
        extra={"environment": environment, "checks_run": 3},
    )


def _check_bot_secrets(settings: Settings, app_config: AppConfig, errors: list[str]) -> None:
    """Enabled bots need their token and a strong webhook secret."""
    features = app_config.features
    min_length = app_config.security.secrets_validation.webhook_secret_min_length

    if features.admin_bot_enabled and not settings.admin_bot_token:
        errors.append("admin_bot_enabled is true but ADMIN_BOT_TOKEN is empty")
    if features.support_bot_enabled and not settings.telegram_bot_token:
        errors.append("support_bot_enabled is true but TELEGRAM_BOT_TOKEN is empty")

    if features.admin_bot_enabled or features.support_bot_enabled:
        secret = settings.telegram_webhook_secret
        if len(secret) < min_length:
            errors.append(
                f"TELEGRAM_WEBHOOK_SECRET is {len(secret)} chars, minimum is {min_length}"
            )


def _check_admin_routing(app_config: AppConfig, errors: list[str]) -> None:
    """Moderation requests need somewhere to go."""
    if not app_config.features.admin_bot_enabled:
        return

    telegram = app_config.application.telegram
    if not telegram.admin_chat_id:
        errors.append("telegram.admin_chat_id is not set")
    if not telegram.admin_user_ids:
        errors.append("telegram.admin_user_ids is empty, nobody could moderate")


def _check_production_safety(app_config: AppConfig, is_production: bool, errors: list[str]) -> None:
    """Validate production environment safety constraints."""
    if not is_production:
        return

    app = app_config.application
    if app.debug:
        errors.append("debug is true in production environment")

    if app_config.features.api_detailed_errors:
        errors.append("api_detailed_errors is true in production environment")

    if app.docs_enabled:
        errors.append("docs_enabled is true in production environment")

    if app_config.security.cors.enforce_in_production:
        localhost_origins = [o for o in app.cors.origins if "localhost" in o]
        if localhost_origins:
            errors.append(
                f"CORS origins contain localhost in production: {localhost_origins}"
            )

"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Usage:
        def test_service(mock_db_session: AsyncMock):
            service = ProfileService(mock_db_session)
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    session.get = AsyncMock()
    return session


# =============================================================================
# Configuration Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_settings() -> MagicMock:
    """
    Mock secrets.

    Usage:
        def test_with_settings(mock_settings):
            with patch("module.get_settings", return_value=mock_settings):
                ...
    """
    settings = MagicMock()
    settings.db_password = "test_pass"
    settings.telegram_bot_token = "123456:TEST-support-bot-token"
    settings.admin_bot_token = "654321:TEST-admin-bot-token"
    settings.telegram_webhook_secret = "test-webhook-secret-0123456789abcdef"
    return settings


@pytest.fixture
def mock_app_config() -> SimpleNamespace:
    """
    Mock YAML application configuration with attribute access.

    Usage:
        def test_with_config(mock_app_config):
            with patch("module.get_app_config", return_value=mock_app_config):
                ...
    """
    return SimpleNamespace(
        application=SimpleNamespace(
            name="Test App",
            version="1.0.0",
            description="Test application",
            environment="test",
            debug=True,
            api_prefix="/api/v1",
            docs_enabled=True,
            server=SimpleNamespace(host="127.0.0.1", port=8000),
            cors=SimpleNamespace(origins=[]),
            timeouts=SimpleNamespace(database=5, external_api=5),
            telegram=SimpleNamespace(
                admin_webhook_path="/webhook/telegram/admin",
                support_webhook_path="/webhook/telegram/support",
                admin_chat_id=-1001234567890,
                admin_user_ids=[111111],
                users_per_page=10,
                init_data_max_age_seconds=0,
                webhook_base_url="",
            ),
        ),
        features=SimpleNamespace(
            admin_bot_enabled=True,
            support_bot_enabled=True,
            api_detailed_errors=False,
            security_startup_checks_enabled=True,
        ),
        security=SimpleNamespace(
            secrets_validation=SimpleNamespace(webhook_secret_min_length=32),
            cors=SimpleNamespace(
                enforce_in_production=True,
                allow_methods=["GET", "POST"],
                allow_headers=["*"],
            ),
        ),
    )

"""
Integration Test Fixtures.

Fixtures for integration tests - services and the FastAPI app run against
the per-test SQLite database. Telegram stays mocked.
"""

import json
import time
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any
from unittest.mock import patch
from urllib.parse import urlencode

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from articlehub.backend.core.database import get_db_session
from articlehub.backend.core.dependencies import get_notifier
from articlehub.backend.core.security import sign_init_data
from articlehub.backend.models.article import Article, ArticleStatus
from articlehub.backend.models.profile import Profile
from articlehub.telegram.services.notifications import NotificationDispatcher
from tests.conftest import AUTHOR_TELEGRAM_ID, TEST_BOT_TOKEN


# =============================================================================
# Data Fixtures
# =============================================================================


@pytest.fixture
def make_profile(db_session: AsyncSession) -> Callable[..., Awaitable[Profile]]:
    """
    Factory that stores a profile.

    Usage:
        author = await make_profile(telegram_id=42, first_name="Ann")
    """

    async def _make(**overrides: Any) -> Profile:
        values: dict[str, Any] = {
            "telegram_id": AUTHOR_TELEGRAM_ID,
            "username": "author",
            "first_name": "Ann",
        }
        values.update(overrides)
        profile = Profile(**values)
        db_session.add(profile)
        await db_session.commit()
        return profile

    return _make


@pytest.fixture
def make_article(db_session: AsyncSession) -> Callable[..., Awaitable[Article]]:
    """
    Factory that stores an article for an existing author.

    Usage:
        article = await make_article(author, title="Test")
    """

    async def _make(author: Profile, **overrides: Any) -> Article:
        values: dict[str, Any] = {
            "author_id": author.id,
            "title": "Test",
            "body": "Body of the test article",
            "preview": "Body of the test article",
            "status": ArticleStatus.PENDING,
        }
        values.update(overrides)
        article = Article(**values)
        db_session.add(article)
        await db_session.commit()
        await db_session.refresh(article)
        return article

    return _make


@pytest.fixture
def fetch(db_session_factory: async_sessionmaker[AsyncSession]) -> Callable[..., Awaitable[Any]]:
    """
    Load a row through a fresh session, as committed.

    Usage:
        stored = await fetch(Article, article_id)
    """

    async def _fetch(model: type, primary_key: Any) -> Any:
        async with db_session_factory() as session:
            return await session.get(model, primary_key)

    return _fetch


def make_init_data(
    telegram_id: int = AUTHOR_TELEGRAM_ID,
    first_name: str = "Ann",
    username: str | None = "author",
    auth_date: int | None = None,
    bot_token: str = TEST_BOT_TOKEN,
) -> str:
    """Signed initData for a Mini App user, as Telegram would issue it."""
    user: dict[str, Any] = {"id": telegram_id, "first_name": first_name}
    if username:
        user["username"] = username
    fields = {
        "query_id": "AAHdF6IQAAAAAN0XohDhrOrc",
        "user": json.dumps(user, separators=(",", ":")),
        "auth_date": str(auth_date if auth_date is not None else int(time.time())),
    }
    fields["hash"] = sign_init_data(fields, bot_token)
    return urlencode(fields)


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
async def client(
    db_session_factory: async_sessionmaker[AsyncSession],
    notifier: NotificationDispatcher,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client on the test database and mocked bots.

    Each request gets its own session from the test factory, like in
    production. Bot webhooks are not mounted.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with db_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    with patch("articlehub.backend.main._mount_bot_webhooks"):
        from articlehub.backend.main import create_app

        app = create_app()

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_notifier] = lambda: notifier

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> dict[str, Any]:
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is True, f"Response not successful: {data}"
        return data

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("error") is not None, f"Missing error details: {data}"

        if expected_code:
            actual_code = data["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )

        return data

    @staticmethod
    def assert_validation_error(response: Any, field: str | None = None) -> dict[str, Any]:
        data = ApiAssertions.assert_error(response, 422, "VAL_REQUEST_INVALID")

        if field:
            errors = data["error"].get("details", {}).get("validation_errors", [])
            fields = [e.get("field", "") for e in errors]
            assert any(field in f for f in fields), (
                f"Expected validation error for field '{field}', "
                f"got errors for: {fields}"
            )

        return data


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()

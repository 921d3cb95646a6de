"""
Integration Tests for Request Context Middleware.

Tests that request context is properly propagated through the API.
"""

import pytest
from httpx import AsyncClient

from tests.integration.conftest import make_init_data

UNKNOWN_ARTICLE_EDIT = "/api/v1/articles/00000000-0000-0000-0000-000000000000/edit"


class TestRequestIdHeader:
    """Tests for X-Request-ID header handling."""

    @pytest.mark.asyncio
    async def test_generates_request_id(self, client: AsyncClient):
        """Should generate X-Request-ID when not provided."""
        response = await client.get("/health")

        assert response.status_code == 200
        # UUID format: 8-4-4-4-12 = 36 characters
        assert len(response.headers["X-Request-ID"]) == 36

    @pytest.mark.asyncio
    async def test_propagates_provided_request_id(self, client: AsyncClient):
        custom_id = "my-custom-request-id-12345"

        response = await client.get("/health", headers={"X-Request-ID": custom_id})

        assert response.headers["X-Request-ID"] == custom_id


class TestResponseTimeHeader:
    """Tests for X-Response-Time header."""

    @pytest.mark.asyncio
    async def test_response_time_is_milliseconds(self, client: AsyncClient):
        response = await client.get("/health")

        time_header = response.headers["X-Response-Time"]
        assert time_header.endswith("ms")
        assert time_header[:-2].isdigit()

    @pytest.mark.asyncio
    async def test_response_time_on_error(self, client: AsyncClient):
        """Should include response time even on error responses."""
        response = await client.post(
            UNKNOWN_ARTICLE_EDIT,
            json={"initData": make_init_data(), "edit": {"title": "T", "body": "B"}},
        )

        assert response.status_code == 404
        assert "X-Response-Time" in response.headers


class TestRequestContextInErrors:
    """Tests for request context in error responses."""

    @pytest.mark.asyncio
    async def test_error_response_includes_request_id(self, client: AsyncClient):
        custom_id = "error-test-request-id"

        response = await client.post(
            UNKNOWN_ARTICLE_EDIT,
            json={"initData": make_init_data(), "edit": {"title": "T", "body": "B"}},
            headers={"X-Request-ID": custom_id},
        )

        assert response.status_code == 404
        assert response.json()["metadata"]["request_id"] == custom_id

    @pytest.mark.asyncio
    async def test_validation_error_includes_request_id(self, client: AsyncClient):
        custom_id = "validation-error-request-id"

        response = await client.post(
            "/api/v1/articles",
            json={},
            headers={"X-Request-ID": custom_id},
        )

        assert response.status_code == 422
        assert response.json()["metadata"]["request_id"] == custom_id

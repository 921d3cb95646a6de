"""
Integration tests for the Mini App article endpoints.

Requests go through the full FastAPI stack with signed initData; the
database is the per-test SQLite database and both bots are mocks.
"""

import base64

import pytest
from httpx import AsyncClient

from articlehub.backend.models.article import Article, ArticleStatus
from articlehub.backend.models.profile import Profile
from tests.conftest import ADMIN_CHAT_ID, AUTHOR_TELEGRAM_ID, sent_to
from tests.integration.conftest import make_init_data

ARTICLES_URL = "/api/v1/articles"


def _article(**overrides) -> dict:
    article = {"title": "Test", "body": "A body long enough to preview"}
    article.update(overrides)
    return article


class TestSubmitArticle:
    """Tests for POST /api/v1/articles."""

    @pytest.mark.asyncio
    async def test_creates_pending_article(self, client: AsyncClient, api, fetch, admin_bot):
        response = await client.post(
            ARTICLES_URL,
            json={"initData": make_init_data(), "article": _article()},
        )

        data = api.assert_success(response, 201)["data"]
        assert data["status"] == "pending"
        assert data["preview"] == "A body long enough to preview"

        stored = await fetch(Article, data["id"])
        assert stored.telegram_message_id == 5000

        request_text = sent_to(admin_bot, ADMIN_CHAT_ID)[0]
        assert "Test" in request_text
        keyboard = admin_bot.send_message.await_args.kwargs["reply_markup"]
        payloads = [b.callback_data for row in keyboard.inline_keyboard for b in row]
        assert payloads[0].startswith("approve:")
        assert payloads[1].startswith("reject:")

    @pytest.mark.asyncio
    async def test_creates_profile_for_new_author(self, client: AsyncClient, api, fetch):
        response = await client.post(
            ARTICLES_URL,
            json={"initData": make_init_data(first_name="Zoe"), "article": _article()},
        )

        data = api.assert_success(response, 201)["data"]
        author = await fetch(Profile, data["author_id"])
        assert author.telegram_id == AUTHOR_TELEGRAM_ID
        assert author.first_name == "Zoe"

    @pytest.mark.asyncio
    async def test_youtube_link_is_detected(self, client: AsyncClient, api):
        response = await client.post(
            ARTICLES_URL,
            json={
                "initData": make_init_data(),
                "article": _article(media_url="https://youtu.be/dQw4w9WgXcQ"),
            },
        )

        assert api.assert_success(response, 201)["data"]["media_type"] == "youtube"

    @pytest.mark.asyncio
    async def test_data_uri_image_is_sent_as_photo(self, client: AsyncClient, api, admin_bot):
        image = "data:image/png;base64," + base64.b64encode(b"\x89PNG\r\n\x1a\n").decode()

        response = await client.post(
            ARTICLES_URL,
            json={"initData": make_init_data(), "article": _article(media_url=image)},
        )

        api.assert_success(response, 201)
        admin_bot.send_photo.assert_awaited_once()
        admin_bot.send_message.assert_not_awaited()
        assert "see above" in admin_bot.send_photo.await_args.kwargs["caption"]

    @pytest.mark.asyncio
    async def test_undelivered_request_still_creates_article(
        self, client: AsyncClient, api, fetch, admin_bot
    ):
        admin_bot.send_message.side_effect = Exception("chat not found")

        response = await client.post(
            ARTICLES_URL,
            json={"initData": make_init_data(), "article": _article()},
        )

        data = api.assert_success(response, 201)["data"]
        assert (await fetch(Article, data["id"])).telegram_message_id is None

    @pytest.mark.asyncio
    async def test_bad_signature_is_401(self, client: AsyncClient, api):
        init_data = make_init_data(bot_token="999:WRONG-token")

        response = await client.post(
            ARTICLES_URL,
            json={"initData": init_data, "article": _article()},
        )

        api.assert_error(response, 401, "AUTH_UNAUTHORIZED")

    @pytest.mark.asyncio
    async def test_stale_init_data_is_401(self, client: AsyncClient, api):
        response = await client.post(
            ARTICLES_URL,
            json={"initData": make_init_data(auth_date=1), "article": _article()},
        )

        api.assert_error(response, 401)

    @pytest.mark.asyncio
    async def test_missing_title_is_422(self, client: AsyncClient, api):
        response = await client.post(
            ARTICLES_URL,
            json={"initData": make_init_data(), "article": {"body": "text"}},
        )

        api.assert_validation_error(response, "title")


class TestEditArticle:
    """Tests for POST /api/v1/articles/{id}/edit."""

    @pytest.fixture
    async def author_id(self, make_profile) -> str:
        author = await make_profile()
        return author.id

    async def _article_id(self, make_article, fetch, author_id: str, **overrides) -> str:
        author = await fetch(Profile, author_id)
        article = await make_article(author, **overrides)
        return article.id

    @pytest.mark.asyncio
    async def test_published_article_keeps_content_until_approved(
        self, client: AsyncClient, api, fetch, make_article, author_id, admin_bot
    ):
        article_id = await self._article_id(
            make_article, fetch, author_id, status=ArticleStatus.APPROVED
        )

        response = await client.post(
            f"{ARTICLES_URL}/{article_id}/edit",
            json={"initData": make_init_data(), "edit": _article(title="Better title")},
        )

        data = api.assert_success(response)["data"]
        assert data["status"] == "approved"
        assert data["title"] == "Test"
        assert data["pending_edit"]["title"] == "Better title"

        keyboard = admin_bot.send_message.await_args.kwargs["reply_markup"]
        payloads = [b.callback_data for row in keyboard.inline_keyboard for b in row]
        assert payloads[0].startswith("edit_approve:")
        assert "Better title" in sent_to(admin_bot, ADMIN_CHAT_ID)[0]

    @pytest.mark.asyncio
    async def test_rejected_article_is_resubmitted(
        self, client: AsyncClient, api, fetch, make_article, author_id, admin_bot
    ):
        article_id = await self._article_id(
            make_article, fetch, author_id,
            status=ArticleStatus.REJECTED, rejection_reason="too short",
        )

        response = await client.post(
            f"{ARTICLES_URL}/{article_id}/edit",
            json={"initData": make_init_data(), "edit": _article(title="Longer")},
        )

        data = api.assert_success(response)["data"]
        assert data["status"] == "pending"
        assert data["title"] == "Longer"
        assert data["rejection_reason"] is None
        assert data["pending_edit"] is None
        payloads = [
            b.callback_data
            for row in admin_bot.send_message.await_args.kwargs["reply_markup"].inline_keyboard
            for b in row
        ]
        assert payloads[0].startswith("approve:")

    @pytest.mark.asyncio
    async def test_other_user_is_403(
        self, client: AsyncClient, api, fetch, make_article, make_profile, author_id
    ):
        article_id = await self._article_id(make_article, fetch, author_id)
        await make_profile(telegram_id=7, username="intruder")

        response = await client.post(
            f"{ARTICLES_URL}/{article_id}/edit",
            json={"initData": make_init_data(telegram_id=7), "edit": _article()},
        )

        api.assert_error(response, 403, "AUTHZ_FORBIDDEN")

    @pytest.mark.asyncio
    async def test_unknown_article_is_404(self, client: AsyncClient, api, author_id):
        response = await client.post(
            f"{ARTICLES_URL}/00000000-0000-0000-0000-000000000000/edit",
            json={"initData": make_init_data(), "edit": _article()},
        )

        api.assert_error(response, 404, "RES_NOT_FOUND")

    @pytest.mark.asyncio
    async def test_caller_without_profile_is_404(self, client: AsyncClient, api):
        response = await client.post(
            f"{ARTICLES_URL}/00000000-0000-0000-0000-000000000000/edit",
            json={"initData": make_init_data(telegram_id=8), "edit": _article()},
        )

        api.assert_error(response, 404)

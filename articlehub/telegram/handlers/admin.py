"""
Admin Commands.

Commands of the admin bot. Access is already restricted by
AdminAuthMiddleware, so every handler here acts for an administrator.
"""

from aiogram import Router
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.types import InlineKeyboardMarkup, Message
from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.backend.core.config import get_app_config
from articlehub.backend.core.exceptions import ApplicationError
from articlehub.backend.core.logging import get_logger
from articlehub.backend.services.moderation import ModerationService
from articlehub.backend.services.profile import ProfileService
from articlehub.backend.services.support import SupportService
from articlehub.telegram import messages
from articlehub.telegram.keyboards import (
    get_moderation_keyboard,
    get_premium_keyboard,
    get_questions_keyboard,
    get_stats_keyboard,
    get_users_page_keyboard,
)
from articlehub.telegram.services.notifications import NotificationDispatcher

logger = get_logger(__name__)

router = Router(name="admin")


async def render_users_page(session: AsyncSession, page: int) -> tuple[str, InlineKeyboardMarkup]:
    """Text and navigation keyboard of one page of the user list."""
    per_page = get_app_config().application.telegram.users_per_page
    result = await ProfileService(session).get_users_page(page, per_page)
    rows = [
        (p.is_premium, p.first_name, p.username, p.telegram_id, p.reputation)
        for p in result.profiles
    ]
    text = messages.users_page(rows, result.total, result.page, result.total_pages)
    return text, get_users_page_keyboard(result.page, result.total_pages)


@router.message(CommandStart())
@router.message(Command("help"))
async def cmd_help(message: Message) -> None:
    await message.answer(messages.ADMIN_HELP)


@router.message(Command("stats"))
async def cmd_stats(message: Message, session: AsyncSession) -> None:
    try:
        stats = await ProfileService(session).get_stats()
    except ApplicationError as e:
        logger.warning("Stats failed", extra={"error": e.message})
        await message.answer(messages.OPERATION_FAILED)
        return

    counts = {status.value: count for status, count in stats.articles.items()}
    await message.answer(
        messages.stats(stats.users, stats.premium_users, counts),
        reply_markup=get_stats_keyboard(),
    )


@router.message(Command("users"))
async def cmd_users(message: Message, session: AsyncSession) -> None:
    try:
        text, keyboard = await render_users_page(session, 0)
    except ApplicationError as e:
        logger.warning("User list failed", extra={"error": e.message})
        await message.answer(messages.OPERATION_FAILED)
        return
    await message.answer(text, reply_markup=keyboard)


@router.message(Command("search"))
async def cmd_search(message: Message, command: CommandObject, session: AsyncSession) -> None:
    """Profile cards for a username fragment or an exact Telegram id."""
    query = (command.args or "").strip()
    if not query:
        await message.answer(messages.SEARCH_USAGE)
        return

    try:
        profiles = await ProfileService(session).search(query)
    except ApplicationError as e:
        logger.warning("Search failed", extra={"error": e.message})
        await message.answer(messages.OPERATION_FAILED)
        return

    if not profiles:
        await message.answer(messages.search_not_found(query))
        return

    for profile in profiles:
        card = messages.profile_card(
            first_name=profile.first_name,
            last_name=profile.last_name,
            username=profile.username,
            telegram_id=profile.telegram_id,
            reputation=profile.reputation,
            is_premium=profile.is_premium,
            premium_expires_at=profile.premium_expires_at,
            created_at=profile.created_at,
        )
        keyboard = (
            get_premium_keyboard(profile.telegram_id, profile.is_premium)
            if profile.telegram_id
            else None
        )
        await message.answer(card, reply_markup=keyboard)


@router.message(Command("premium"))
async def cmd_premium(message: Message, session: AsyncSession) -> None:
    try:
        total, profiles = await ProfileService(session).get_premium_overview()
    except ApplicationError as e:
        logger.warning("Premium overview failed", extra={"error": e.message})
        await message.answer(messages.OPERATION_FAILED)
        return

    rows = [(p.first_name, p.username, p.premium_expires_at) for p in profiles]
    await message.answer(messages.premium_overview(total, rows))


@router.message(Command("pending"))
async def cmd_pending(
    message: Message,
    session: AsyncSession,
    notifier: NotificationDispatcher,
) -> None:
    """One card with approve/reject buttons per pending article."""
    try:
        cards = await ModerationService(session, notifier).pending_queue()
    except ApplicationError as e:
        logger.warning("Pending queue failed", extra={"error": e.message})
        await message.answer(messages.OPERATION_FAILED)
        return

    if not cards:
        await message.answer(messages.NO_PENDING_ARTICLES)
        return

    await message.answer(messages.pending_header(len(cards)))
    for card in cards:
        await message.answer(
            messages.pending_article_card(
                title=card.title,
                author_name=card.author_name,
                author_username=card.author_username,
                preview=card.preview,
                created_at=card.created_at,
            ),
            reply_markup=get_moderation_keyboard(card.short_id),
        )


@router.message(Command("questions"))
async def cmd_questions(
    message: Message,
    session: AsyncSession,
    notifier: NotificationDispatcher,
) -> None:
    try:
        questions = await SupportService(session, notifier).list_pending()
    except ApplicationError as e:
        logger.warning("Question list failed", extra={"error": e.message})
        await message.answer(messages.OPERATION_FAILED)
        return

    if not questions:
        await message.answer(messages.NO_PENDING_QUESTIONS)
        return

    await message.answer(
        messages.questions_header(len(questions)),
        reply_markup=get_questions_keyboard((q.id, q.question) for q in questions),
    )


@router.message(Command("broadcast"))
async def cmd_broadcast(
    message: Message,
    command: CommandObject,
    session: AsyncSession,
    notifier: NotificationDispatcher,
) -> None:
    """Send an announcement to every profile with a Telegram id."""
    text = (command.args or "").strip()
    if not text:
        await message.answer(messages.BROADCAST_USAGE)
        return

    service = ProfileService(session, notifier)
    try:
        recipients = await service.count_broadcast_recipients()
        if not recipients:
            await message.answer(messages.BROADCAST_NO_RECIPIENTS)
            return

        await message.answer(messages.broadcast_started(recipients))
        summary = await service.broadcast(text)
    except ApplicationError as e:
        logger.warning("Broadcast failed", extra={"error": e.message})
        await message.answer(messages.OPERATION_FAILED)
        return

    logger.info(
        "Broadcast finished",
        extra={"sent": summary.sent, "failed": summary.failed, "admin": message.from_user.id},
    )
    await message.answer(messages.broadcast_finished(summary.sent, summary.failed))

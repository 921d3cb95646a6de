"""
Callback Router.

Every inline button of the admin bot lands here. The payload is parsed into
a CallbackAction and dispatched through CALLBACK_HANDLERS by verb.

Each callback query is answered exactly once, in `finally`, with the toast
the handler produced (or none). Unknown verbs are answered silently.
"""

from dataclasses import dataclass
from typing import Awaitable, Callable

from aiogram import Router
from aiogram.exceptions import TelegramAPIError
from aiogram.types import CallbackQuery
from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.backend.core.exceptions import ApplicationError, NotFoundError
from articlehub.backend.core.logging import get_logger, log_with_source
from articlehub.backend.services.moderation import ButtonPress, ModerationService
from articlehub.backend.services.profile import ProfileService
from articlehub.backend.services.support import SupportService
from articlehub.telegram import messages
from articlehub.telegram.callbacks import CallbackAction, CallbackVerb
from articlehub.telegram.handlers.admin import render_users_page
from articlehub.telegram.services.notifications import NotificationDispatcher

logger = get_logger(__name__)

router = Router(name="callbacks")


@dataclass(frozen=True)
class CallbackContext:
    argument: str
    press: ButtonPress
    session: AsyncSession
    notifier: NotificationDispatcher


CallbackHandler = Callable[[CallbackContext], Awaitable[str | None]]


def button_press(callback: CallbackQuery) -> ButtonPress:
    """Who pressed, and where. Inaccessible messages fall back to the private chat."""
    message = callback.message
    return ButtonPress(
        admin_id=callback.from_user.id,
        chat_id=message.chat.id if message else callback.from_user.id,
        message_id=message.message_id if message else 0,
    )


def _telegram_id(argument: str) -> int:
    try:
        return int(argument)
    except ValueError:
        raise NotFoundError(messages.TOAST_USER_NOT_FOUND)


async def on_approve(ctx: CallbackContext) -> str:
    outcome = await ModerationService(ctx.session, ctx.notifier).approve(ctx.argument, ctx.press)
    return outcome.toast


async def on_reject(ctx: CallbackContext) -> str:
    service = ModerationService(ctx.session, ctx.notifier)
    outcome = await service.open_rejection(ctx.argument, ctx.press)
    return outcome.toast


async def on_edit_approve(ctx: CallbackContext) -> str:
    service = ModerationService(ctx.session, ctx.notifier)
    outcome = await service.approve_edit(ctx.argument, ctx.press)
    return outcome.toast


async def on_edit_reject(ctx: CallbackContext) -> str:
    service = ModerationService(ctx.session, ctx.notifier)
    outcome = await service.reject_edit(ctx.argument, ctx.press)
    return outcome.toast


async def on_users_page(ctx: CallbackContext) -> None:
    """Edit the user list in place to show another page."""
    try:
        page = int(ctx.argument)
    except ValueError:
        page = 0
    text, keyboard = await render_users_page(ctx.session, page)
    await ctx.notifier.edit_admin_message(
        ctx.press.chat_id, ctx.press.message_id, text, reply_markup=keyboard
    )
    return None


async def on_premium_grant(ctx: CallbackContext) -> str:
    telegram_id = _telegram_id(ctx.argument)
    profile = await ProfileService(ctx.session, ctx.notifier).grant_premium(telegram_id)
    await ctx.notifier.notify_admin_channel(
        messages.admin_premium_granted(telegram_id, profile.premium_expires_at),
        chat_id=ctx.press.chat_id,
    )
    return messages.TOAST_PREMIUM_GRANTED


async def on_premium_revoke(ctx: CallbackContext) -> str:
    telegram_id = _telegram_id(ctx.argument)
    await ProfileService(ctx.session, ctx.notifier).revoke_premium(telegram_id)
    await ctx.notifier.notify_admin_channel(
        messages.admin_premium_revoked(telegram_id), chat_id=ctx.press.chat_id
    )
    return messages.TOAST_PREMIUM_REVOKED


async def on_premium_extend(ctx: CallbackContext) -> str:
    telegram_id = _telegram_id(ctx.argument)
    profile = await ProfileService(ctx.session, ctx.notifier).extend_premium(telegram_id)
    await ctx.notifier.notify_admin_channel(
        messages.admin_premium_extended(telegram_id, profile.premium_expires_at),
        chat_id=ctx.press.chat_id,
    )
    return messages.TOAST_PREMIUM_EXTENDED


async def on_question(ctx: CallbackContext) -> None:
    await SupportService(ctx.session, ctx.notifier).show_question(ctx.argument, ctx.press.chat_id)
    return None


CALLBACK_HANDLERS: dict[CallbackVerb, CallbackHandler] = {
    CallbackVerb.APPROVE: on_approve,
    CallbackVerb.REJECT: on_reject,
    CallbackVerb.EDIT_APPROVE: on_edit_approve,
    CallbackVerb.EDIT_REJECT: on_edit_reject,
    CallbackVerb.USERS: on_users_page,
    CallbackVerb.PREMIUM_GRANT: on_premium_grant,
    CallbackVerb.PREMIUM_REVOKE: on_premium_revoke,
    CallbackVerb.PREMIUM_EXTEND: on_premium_extend,
    CallbackVerb.QUESTION: on_question,
}


async def acknowledge(callback: CallbackQuery, toast: str | None) -> None:
    try:
        await callback.answer(toast)
    except TelegramAPIError as e:
        logger.warning("Failed to answer callback query", extra={"error": str(e)})


@router.callback_query()
async def route_callback(
    callback: CallbackQuery,
    session: AsyncSession,
    notifier: NotificationDispatcher,
) -> None:
    action = CallbackAction.parse(callback.data)
    toast: str | None = None

    try:
        handler = CALLBACK_HANDLERS.get(action.verb) if action.verb else None
        if handler is None:
            logger.debug("Ignoring unknown callback verb", extra={"verb": action.raw_verb})
            return

        ctx = CallbackContext(
            argument=action.argument,
            press=button_press(callback),
            session=session,
            notifier=notifier,
        )
        toast = await handler(ctx)

    except NotFoundError as e:
        toast = e.message
    except ApplicationError as e:
        logger.warning(
            "Callback action failed",
            extra={"verb": action.raw_verb, "error": e.message, "code": e.code},
        )
        toast = messages.TOAST_FAILED
    except Exception as e:
        log_with_source(
            logger,
            "telegram",
            "error",
            "Unexpected error in callback action",
            verb=action.raw_verb,
            error=str(e),
            error_type=type(e).__name__,
        )
        toast = messages.TOAST_FAILED
    finally:
        await acknowledge(callback, toast)

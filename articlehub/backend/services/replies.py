"""
Reply Correlator.

Decides what an admin's free-text message in the admin bot means:

1. a reply to an opened support question is the answer to it
2. otherwise, if the admin has an open rejection, it is the rejection reason
3. otherwise it is not understood and the admin gets a help hint

Known commands are handled before this point; unknown ones are treated as
plain text.
"""

import enum
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.backend.services.base import BaseService
from articlehub.backend.services.moderation import ModerationService
from articlehub.backend.services.support import SupportService
from articlehub.telegram import messages
from articlehub.telegram.services.notifications import NotificationDispatcher


class ReplyKind(str, enum.Enum):
    SUPPORT_ANSWER = "support_answer"
    REJECTION_REASON = "rejection_reason"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True)
class ReplyOutcome:
    kind: ReplyKind
    subject_id: str | None = None


class ReplyCorrelator(BaseService):
    def __init__(self, session: AsyncSession, notifier: NotificationDispatcher) -> None:
        super().__init__(session)
        self.notifier = notifier
        self.support = SupportService(session, notifier)
        self.moderation = ModerationService(session, notifier)

    async def route(
        self,
        admin_id: int,
        chat_id: int,
        text: str,
        reply_to_message_id: int | None = None,
    ) -> ReplyOutcome:
        if reply_to_message_id is not None:
            question = await self.support.answer_by_reply(
                admin_id, reply_to_message_id, text, chat_id
            )
            if question is not None:
                return ReplyOutcome(ReplyKind.SUPPORT_ANSWER, question.id)

        outcome = await self.moderation.complete_rejection(admin_id, text, chat_id)
        if outcome is not None:
            return ReplyOutcome(ReplyKind.REJECTION_REASON, outcome.article_id)

        await self.notifier.notify_admin_channel(messages.HELP_HINT, chat_id=chat_id)
        return ReplyOutcome(ReplyKind.UNRECOGNIZED)

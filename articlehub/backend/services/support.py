"""
Support Service.

Relays questions from the support bot to the admin chat and answers back.

A question is answered by replying to the admin-chat message that shows it.
That message's chat and id are stored each time the question is opened, so
only a reply to the latest opened copy, in the same chat, is recognized.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.backend.core.exceptions import NotFoundError
from articlehub.backend.core.utils import utc_now
from articlehub.backend.models.support import SupportQuestion, SupportStatus
from articlehub.backend.repositories.profile import ProfileRepository
from articlehub.backend.repositories.support_question import SupportQuestionRepository
from articlehub.backend.services.base import BaseService
from articlehub.telegram import messages
from articlehub.telegram.keyboards import get_questions_keyboard
from articlehub.telegram.services.notifications import NotificationDispatcher

PENDING_QUESTIONS_LIMIT = 20


class SupportService(BaseService):
    def __init__(self, session: AsyncSession, notifier: NotificationDispatcher) -> None:
        super().__init__(session)
        self.notifier = notifier
        self.question_repo = SupportQuestionRepository(session)
        self.profile_repo = ProfileRepository(session)

    async def submit_question(
        self,
        user_telegram_id: int,
        question: str,
        user_name: str | None = None,
    ) -> SupportQuestion:
        """Store a question from the support bot and alert the admin chat."""
        profile = await self._execute_db_operation(
            "find asker profile", self.profile_repo.get_by_telegram_id(user_telegram_id)
        )
        record = await self._execute_db_operation(
            "create support question",
            self.question_repo.create(
                user_telegram_id=user_telegram_id,
                user_profile_id=profile.id if profile else None,
                question=question,
                status=SupportStatus.PENDING,
            ),
        )
        await self._commit("create support question")

        self._log_operation("Support question received", question_id=record.id)

        name = user_name or (profile.first_name if profile else None)
        await self.notifier.notify_admin_channel(
            messages.support_question_alert(question, name, user_telegram_id),
            reply_markup=get_questions_keyboard([(record.id, question)]),
        )
        return record

    async def list_pending(self, limit: int = PENDING_QUESTIONS_LIMIT) -> list[SupportQuestion]:
        return await self._execute_db_operation(
            "list pending questions", self.question_repo.get_latest_pending(limit)
        )

    async def show_question(self, id_prefix: str, chat_id: int) -> SupportQuestion:
        """
        Send the full question to the admin and remember that message.

        Raises:
            NotFoundError: No single pending question matches the prefix
        """
        if not id_prefix:
            raise NotFoundError(messages.TOAST_QUESTION_NOT_FOUND)

        question = await self._execute_db_operation(
            "find question", self.question_repo.get_pending_by_prefix(id_prefix)
        )
        if question is None:
            raise NotFoundError(messages.TOAST_QUESTION_NOT_FOUND)

        profile = await self._execute_db_operation(
            "find asker profile",
            self.profile_repo.get_by_telegram_id(question.user_telegram_id),
        )
        text = messages.support_question_card(
            question_id=question.id,
            question=question.question,
            user_name=profile.first_name if profile else None,
            user_username=profile.username if profile else None,
            user_telegram_id=question.user_telegram_id,
            created_at=question.created_at,
        )
        result = await self.notifier.notify_admin_channel(text, chat_id=chat_id)

        if result.success and result.message_id is not None:
            question.admin_chat_id = chat_id
            question.admin_message_id = result.message_id
            await self._commit("store question message id")
        return question

    async def answer_by_reply(
        self,
        admin_id: int,
        reply_to_message_id: int,
        answer: str,
        chat_id: int,
    ) -> SupportQuestion | None:
        """
        Treat `answer` as the reply to the question shown in that message.

        Returns:
            The answered question, or None if that message in that chat shows
            no pending question
        """
        question = await self._execute_db_operation(
            "find question by message",
            self.question_repo.get_pending_by_admin_message(chat_id, reply_to_message_id),
        )
        if question is None:
            return None

        question.answer = answer
        question.status = SupportStatus.ANSWERED
        question.answered_by_telegram_id = admin_id
        question.answered_at = utc_now()
        await self._commit("answer support question")

        self._log_operation("Support question answered", question_id=question.id, admin=admin_id)

        await self.notifier.notify_author(
            question.user_telegram_id,
            messages.support_answer(question.question, answer),
        )
        await self.notifier.notify_admin_channel(messages.ADMIN_ANSWER_SENT, chat_id=chat_id)
        return question

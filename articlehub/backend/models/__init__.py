# Importing the models registers them on Base.metadata
from articlehub.backend.models.article import Article, ArticleStatus, MediaType
from articlehub.backend.models.base import Base
from articlehub.backend.models.moderation import (
    ModerationAction,
    ModerationLog,
    ModerationShortId,
    PendingRejection,
)
from articlehub.backend.models.profile import Profile
from articlehub.backend.models.support import SupportQuestion, SupportStatus

__all__ = [
    "Article",
    "ArticleStatus",
    "Base",
    "MediaType",
    "ModerationAction",
    "ModerationLog",
    "ModerationShortId",
    "PendingRejection",
    "Profile",
    "SupportQuestion",
    "SupportStatus",
]

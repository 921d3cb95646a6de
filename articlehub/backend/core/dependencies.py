"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

import uuid
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.backend.core.database import get_db_session
from articlehub.backend.core.logging import get_logger
from articlehub.telegram.services.notifications import (
    NotificationDispatcher,
    get_notification_dispatcher,
)

logger = get_logger(__name__)

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """
    Extract or generate request ID from headers.

    Used for request tracing and correlation.
    """
    return x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


def get_notifier() -> NotificationDispatcher:
    """Provide the notification dispatcher over both bots."""
    return get_notification_dispatcher()


Notifier = Annotated[NotificationDispatcher, Depends(get_notifier)]

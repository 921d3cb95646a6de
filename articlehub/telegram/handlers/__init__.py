"""
Telegram Bot Handlers.

Handler Organization:
- admin.py: admin bot commands (/stats, /users, /pending, ...)
- callbacks.py: admin bot inline buttons, dispatched by callback verb
- replies.py: admin free text (support answers, rejection reasons)
- support.py: support bot (/start and question relay)
"""

from aiogram import Router

from articlehub.telegram.handlers.admin import router as admin_router
from articlehub.telegram.handlers.callbacks import router as callbacks_router
from articlehub.telegram.handlers.replies import router as replies_router
from articlehub.telegram.handlers.support import router as support_router

__all__ = [
    "get_admin_routers",
    "get_support_routers",
    "admin_router",
    "callbacks_router",
    "replies_router",
    "support_router",
]


def get_admin_routers() -> list[Router]:
    """Commands go first so the free-text router never sees them."""
    return [
        admin_router,
        callbacks_router,
        replies_router,
    ]


def get_support_routers() -> list[Router]:
    return [support_router]

"""
Security Utilities.

Verification of Telegram Mini App initData.

The Mini App signs its launch parameters with HMAC-SHA256. The data-check
string is every `key=value` pair except `hash`, sorted and joined by newlines.
The HMAC key is itself HMAC-SHA256 of the bot token keyed with "WebAppData".
"""

import hashlib
import hmac
import json
import time
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qsl

from articlehub.backend.core.exceptions import AuthenticationError
from articlehub.backend.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TelegramUser:
    """The Telegram user carried by verified initData."""

    id: int
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    photo_url: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "TelegramUser":
        return cls(
            id=int(payload["id"]),
            first_name=payload.get("first_name"),
            last_name=payload.get("last_name"),
            username=payload.get("username"),
            photo_url=payload.get("photo_url"),
        )


def build_data_check_string(fields: dict[str, str]) -> str:
    """Sorted `key=value` lines of every field except the hash."""
    pairs = sorted(f"{key}={value}" for key, value in fields.items() if key != "hash")
    return "\n".join(pairs)


def sign_init_data(fields: dict[str, str], bot_token: str) -> str:
    """Compute the hex signature Telegram would attach to these fields."""
    secret_key = hmac.new(b"WebAppData", bot_token.encode("utf-8"), hashlib.sha256).digest()
    data_check_string = build_data_check_string(fields)
    return hmac.new(secret_key, data_check_string.encode("utf-8"), hashlib.sha256).hexdigest()


def verify_init_data(
    init_data: str,
    bot_token: str,
    max_age_seconds: int = 0,
    now: float | None = None,
) -> TelegramUser:
    """
    Verify initData and return the user it was issued for.

    Args:
        init_data: Raw query string passed by the Mini App
        bot_token: Token of the bot that launched the Mini App
        max_age_seconds: Reject data older than this; 0 disables the check
        now: Current unix time, for tests

    Raises:
        AuthenticationError: Signature missing or wrong, data stale, or no user
    """
    fields = dict(parse_qsl(init_data, keep_blank_values=True))
    received_hash = fields.get("hash")
    if not received_hash:
        raise AuthenticationError("Invalid Telegram initData")

    expected_hash = sign_init_data(fields, bot_token)
    if not hmac.compare_digest(expected_hash, received_hash):
        logger.warning("initData signature mismatch")
        raise AuthenticationError("Invalid Telegram initData")

    if max_age_seconds > 0:
        current = now if now is not None else time.time()
        try:
            auth_date = int(fields.get("auth_date", "0"))
        except ValueError:
            raise AuthenticationError("Invalid Telegram initData")
        if current - auth_date > max_age_seconds:
            logger.warning("initData expired", extra={"auth_date": auth_date})
            raise AuthenticationError("Telegram initData expired")

    raw_user = fields.get("user")
    if not raw_user:
        raise AuthenticationError("Invalid Telegram initData")
    try:
        return TelegramUser.from_payload(json.loads(raw_user))
    except (ValueError, KeyError, TypeError):
        raise AuthenticationError("Invalid Telegram initData")


def authenticate_init_data(init_data: str) -> TelegramUser:
    """Verify initData against the Mini App bot token from configuration."""
    from articlehub.backend.core.config import get_app_config, get_settings

    return verify_init_data(
        init_data,
        bot_token=get_settings().telegram_bot_token,
        max_age_seconds=get_app_config().application.telegram.init_data_max_age_seconds,
    )

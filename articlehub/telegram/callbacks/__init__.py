"""
Callback Payloads.

Admin-bot buttons use plain `verb:argument` callback data.
See actions.py for the format and its limits.
"""

from articlehub.telegram.callbacks.actions import (
    MAX_CALLBACK_DATA_BYTES,
    CallbackAction,
    CallbackDataTooLong,
    CallbackVerb,
    pack_action,
)

__all__ = [
    "MAX_CALLBACK_DATA_BYTES",
    "CallbackAction",
    "CallbackDataTooLong",
    "CallbackVerb",
    "pack_action",
]

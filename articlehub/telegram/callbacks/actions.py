"""
Callback Actions.

Inline buttons of the admin bot carry `verb:argument` payloads. The argument
is an article short id, a page number, a Telegram user id or a support
question id prefix, depending on the verb.

The payload is split on the first colon only, so arguments may contain
colons. Unknown verbs parse to `verb=None` and are ignored by the router.

Example:
    action = CallbackAction.parse("approve:Ab3dE9xZ")
    action.verb       # CallbackVerb.APPROVE
    action.argument   # "Ab3dE9xZ"

    CallbackAction(CallbackVerb.USERS, "2").pack()   # "users:2"
"""

from dataclasses import dataclass
from enum import Enum

# Telegram rejects callback_data longer than this many bytes
MAX_CALLBACK_DATA_BYTES = 64

SEPARATOR = ":"


class CallbackVerb(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"
    EDIT_APPROVE = "edit_approve"
    EDIT_REJECT = "edit_reject"
    USERS = "users"
    PREMIUM_GRANT = "premium_grant"
    PREMIUM_REVOKE = "premium_revoke"
    PREMIUM_EXTEND = "premium_extend"
    QUESTION = "question"


class CallbackDataTooLong(ValueError):
    pass


@dataclass(frozen=True)
class CallbackAction:
    """A parsed button payload. `verb` is None when the verb is not recognized."""

    verb: CallbackVerb | None
    argument: str
    raw_verb: str = ""

    @classmethod
    def parse(cls, data: str | None) -> "CallbackAction":
        raw_verb, _, argument = (data or "").partition(SEPARATOR)
        try:
            verb = CallbackVerb(raw_verb)
        except ValueError:
            verb = None
        return cls(verb=verb, argument=argument, raw_verb=raw_verb)

    def pack(self) -> str:
        """
        Serialize to `verb:argument`.

        Raises:
            ValueError: No verb to pack
            CallbackDataTooLong: Payload exceeds Telegram's 64-byte limit
        """
        if self.verb is None:
            raise ValueError("Cannot pack a callback action without a verb")
        data = f"{self.verb.value}{SEPARATOR}{self.argument}"
        if len(data.encode("utf-8")) > MAX_CALLBACK_DATA_BYTES:
            raise CallbackDataTooLong(
                f"callback_data is {len(data.encode('utf-8'))} bytes, "
                f"limit is {MAX_CALLBACK_DATA_BYTES}"
            )
        return data


def pack_action(verb: CallbackVerb, argument: object) -> str:
    return CallbackAction(verb, str(argument)).pack()

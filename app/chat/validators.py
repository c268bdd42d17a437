"""
Validation of chat names, user names, message text and page limits.

Each validator returns the cleaned value or raises InvalidInputError with
field-level details, so callers can surface messages verbatim.

Usage:
    from chat.validators import chat_name_policy, validate_name

    name = validate_name(raw_name, chat_name_policy(), field="chat_name")
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from chat.constants import chat_setting
from chat.exceptions import InvalidInputError


@dataclass(frozen=True)
class NamePolicy:
    """Length and character set constraints for a name field."""

    min_length: int
    max_length: int
    allowed_pattern: str

    def matches(self, value: str) -> bool:
        return re.fullmatch(self.allowed_pattern, value) is not None


def chat_name_policy() -> NamePolicy:
    return NamePolicy(
        min_length=chat_setting("CHAT_NAME_MIN_LENGTH"),
        max_length=chat_setting("CHAT_NAME_MAX_LENGTH"),
        allowed_pattern=chat_setting("CHAT_NAME_ALLOWED_PATTERN"),
    )


def user_name_policy() -> NamePolicy:
    return NamePolicy(
        min_length=chat_setting("USER_NAME_MIN_LENGTH"),
        max_length=chat_setting("USER_NAME_MAX_LENGTH"),
        allowed_pattern=chat_setting("USER_NAME_ALLOWED_PATTERN"),
    )


def _invalid(field: str, message: str) -> InvalidInputError:
    return InvalidInputError(message, details={field: [message]})


def validate_name(value: str | None, policy: NamePolicy, field: str = "name") -> str:
    """
    Validate a name against policy.

    Surrounding whitespace is stripped before checking.

    Args:
        value: Raw name
        policy: Constraints to apply
        field: Field name used in error details

    Returns:
        The stripped name

    Raises:
        InvalidInputError: If the name is missing, too short, too long
            or contains characters outside the allowed set
    """
    if not isinstance(value, str):
        raise _invalid(field, f"{field} must be a string")

    name = value.strip()
    if len(name) < policy.min_length:
        raise _invalid(
            field, f"{field} must be at least {policy.min_length} characters"
        )
    if len(name) > policy.max_length:
        raise _invalid(
            field, f"{field} must be at most {policy.max_length} characters"
        )
    if not policy.matches(name):
        raise _invalid(field, f"{field} contains characters that are not allowed")
    return name


def validate_message_text(text: str | None) -> str:
    """
    Validate a message payload.

    The text is stored verbatim; it only has to contain something other
    than whitespace and fit within MESSAGE_MAX_LENGTH.

    Raises:
        InvalidInputError: If text is missing, blank or oversized
    """
    if not isinstance(text, str):
        raise _invalid("text", "text must be a string")
    if not text.strip():
        raise _invalid("text", "Message text cannot be empty")

    max_length = chat_setting("MESSAGE_MAX_LENGTH")
    if len(text) > max_length:
        raise _invalid("text", f"Message text must be at most {max_length} characters")
    return text


def validate_page_limit(limit) -> int:
    """
    Validate the number of messages requested per page.

    Raises:
        InvalidInputError: If limit is not an integer within
            [PAGE_LIMIT_MIN, PAGE_LIMIT_MAX]
    """
    if isinstance(limit, bool) or not isinstance(limit, int):
        raise _invalid("limit", "limit must be an integer")

    low = chat_setting("PAGE_LIMIT_MIN")
    high = chat_setting("PAGE_LIMIT_MAX")
    if not low <= limit <= high:
        raise _invalid("limit", f"limit must be between {low} and {high}")
    return limit

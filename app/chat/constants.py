"""
Constants and configuration for the chat module.

This module centralizes configuration values for:
- Chat and user name policies (length, character set)
- Membership policy for repeated joins
- Message payload and page size limits
- Cursor signing
- Append serialization and storage retries

Every value can be overridden per key through the ``CHAT`` dict in Django
settings. Values are read at call time, so ``override_settings`` and the
pytest-django ``settings`` fixture take effect immediately.

Import example:
    from chat.constants import chat_setting

    max_length = chat_setting("MESSAGE_MAX_LENGTH")
"""

from __future__ import annotations

from typing import Any, Final

from django.conf import settings


class JoinPolicy:
    """Outcome of joining a user name that is already a member."""

    IDEMPOTENT: Final[str] = "idempotent"  # Return the existing member
    REJECT: Final[str] = "reject"  # Fail with ALREADY_MEMBER

    CHOICES: Final[tuple] = (IDEMPOTENT, REJECT)


class ErrorCode:
    """Machine-readable error codes returned by the chat service."""

    INVALID_INPUT: Final[str] = "INVALID_INPUT"
    CHAT_NOT_FOUND: Final[str] = "CHAT_NOT_FOUND"
    USER_NOT_FOUND: Final[str] = "USER_NOT_FOUND"
    INVALID_CURSOR: Final[str] = "INVALID_CURSOR"
    ALREADY_MEMBER: Final[str] = "ALREADY_MEMBER"
    INTERNAL: Final[str] = "INTERNAL"


# =============================================================================
# Defaults
# =============================================================================

DEFAULTS: Final[dict[str, Any]] = {
    # Chat names
    "CHAT_NAME_MIN_LENGTH": 1,
    "CHAT_NAME_MAX_LENGTH": 100,
    "CHAT_NAME_ALLOWED_PATTERN": r"[\w .,:'!?()#&+\-]+",
    # User names (unique within a chat)
    "USER_NAME_MIN_LENGTH": 1,
    "USER_NAME_MAX_LENGTH": 64,
    "USER_NAME_ALLOWED_PATTERN": r"[\w .@\-]+",
    "DUPLICATE_JOIN_POLICY": JoinPolicy.IDEMPOTENT,
    # Messages
    "MESSAGE_MAX_LENGTH": 10000,  # Characters
    "PAGE_LIMIT_MIN": 1,
    "PAGE_LIMIT_MAX": 1000,
    # Cursors
    "CURSOR_SIGNED": True,
    "CURSOR_SIGNING_KEY": None,  # None = SECRET_KEY
    "CURSOR_SALT": "chat.cursor",
    # Message log
    "STORAGE_RETRY_ATTEMPTS": 3,
    "STORAGE_RETRY_DELAY_SECONDS": 0.05,
}


def chat_setting(key: str) -> Any:
    """
    Return the configured value for key.

    Raises:
        KeyError: If key is not a known chat setting
    """
    if key not in DEFAULTS:
        raise KeyError(f"Unknown chat setting: {key}")
    overrides = getattr(settings, "CHAT", None) or {}
    return overrides.get(key, DEFAULTS[key])

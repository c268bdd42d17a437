"""
Chat-specific exceptions.

The store, the message log and the cursor codec raise these; ChatService
converts them into ServiceResult failures carrying the same error code.

Exception Hierarchy:
    InvalidInputError (ValidationError) - INVALID_INPUT
    InvalidCursorError (ValidationError) - INVALID_CURSOR
    ChatNotFoundError (NotFoundError) - CHAT_NOT_FOUND
    UserNotFoundError (NotFoundError) - USER_NOT_FOUND
    AlreadyMemberError (ConflictError) - ALREADY_MEMBER
    StorageError (BaseApplicationError) - INTERNAL

Usage:
    from chat.exceptions import ChatNotFoundError

    raise ChatNotFoundError(
        f"Chat {chat_id} not found",
        details={"chat_id": str(chat_id)},
    )
"""

from __future__ import annotations

from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)

from chat.constants import ErrorCode


class InvalidInputError(ValidationError):
    """
    Malformed name, text or limit.

    details maps field names to lists of messages, e.g.
    {"text": ["This field may not be blank."]}.
    """

    default_error_code: str = ErrorCode.INVALID_INPUT


class InvalidCursorError(ValidationError):
    """Malformed or tampered cursor token, or a cursor issued for another chat."""

    default_error_code: str = ErrorCode.INVALID_CURSOR


class ChatNotFoundError(NotFoundError):
    default_error_code: str = ErrorCode.CHAT_NOT_FOUND


class UserNotFoundError(NotFoundError):
    """The user name is not a member of the chat."""

    default_error_code: str = ErrorCode.USER_NOT_FOUND


class AlreadyMemberError(ConflictError):
    """Raised on a repeated join when the join policy is "reject"."""

    default_error_code: str = ErrorCode.ALREADY_MEMBER


class StorageError(BaseApplicationError):
    """
    Storage failure that survived bounded retries.

    A failed append leaves no partial sequence advance behind.
    """

    default_error_code: str = ErrorCode.INTERNAL

"""
Chat system service layer.

ChatService is the single entry point for chat operations. It orders the
checks for each operation, delegates state changes to ChatStore and
MessageLog, translates cursors with CursorCodec, and returns ServiceResult
values instead of raising.

Design Principles:
    - Services are stateless (use class methods)
    - Domain failures become ServiceResult.failure() with their error code
    - Storage failures are logged with traceback and reported as INTERNAL
    - Validation order is fixed so the reported error is deterministic

Usage:
    from chat.services import ChatService

    result = ChatService.create_chat("team")
    if result.success:
        chat = result.data

    result = ChatService.send_message(chat.id, "alice", "hello")
    if not result.success:
        print(result.error_code)  # e.g. "USER_NOT_FOUND"

    result = ChatService.get_messages(chat.id, limit=50)
    page = result.data  # MessagesPage(messages=[...], next_cursor="...")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from django.db import DatabaseError

from core.exceptions import BaseApplicationError
from core.services import BaseService, ServiceResult

from chat.constants import ErrorCode
from chat.cursors import CursorCodec
from chat.exceptions import InvalidCursorError, StorageError
from chat.log import MessageLog
from chat.models import Chat, Message
from chat.store import ChatStore, JoinOutcome
from chat.validators import validate_message_text, validate_page_limit


@dataclass
class MessagesPage:
    """A page of messages and the cursor for the next one (None on the last page)."""

    messages: list[Message] = field(default_factory=list)
    next_cursor: str | None = None


class ChatService(BaseService):
    """
    Service for chat operations.

    Methods:
        create_chat: Create a named chat
        join_user: Add a user name to a chat
        send_message: Append a message from a member
        get_messages: Page through a chat's messages with a cursor

    Error codes:
        INVALID_INPUT, CHAT_NOT_FOUND, USER_NOT_FOUND, INVALID_CURSOR,
        ALREADY_MEMBER, INTERNAL
    """

    @classmethod
    def _failure(cls, exc: Exception, context: str) -> ServiceResult:
        if isinstance(exc, StorageError):
            return cls.handle_exception(exc, context, logging.ERROR)
        if isinstance(exc, BaseApplicationError):
            return cls.handle_exception(exc, context, logging.INFO)
        return cls.handle_exception(
            exc, context, logging.ERROR, error_code=ErrorCode.INTERNAL
        )

    @classmethod
    def create_chat(cls, name: str) -> ServiceResult[Chat]:
        """
        Create a chat.

        Returns:
            ServiceResult with the new Chat

        Error codes:
            INVALID_INPUT: Name violates the chat name policy
            INTERNAL: Storage failure
        """
        try:
            chat = ChatStore.create_chat(name)
        except (BaseApplicationError, DatabaseError) as exc:
            return cls._failure(exc, "create_chat")
        return ServiceResult.success(chat)

    @classmethod
    def join_user(cls, chat_id, user_name: str) -> ServiceResult[JoinOutcome]:
        """
        Join a user name to a chat.

        Returns:
            ServiceResult with JoinOutcome(member, created)

        Error codes:
            INVALID_INPUT: User name violates the user name policy
            CHAT_NOT_FOUND: Unknown chat
            ALREADY_MEMBER: Repeated join under the "reject" policy
            INTERNAL: Storage failure
        """
        try:
            outcome = ChatStore.add_member(chat_id, user_name)
        except (BaseApplicationError, DatabaseError) as exc:
            return cls._failure(exc, f"join_user chat={chat_id}")
        return ServiceResult.success(outcome)

    @classmethod
    def send_message(cls, chat_id, user_id: str, text: str) -> ServiceResult[Message]:
        """
        Append a message to a chat.

        Checks run in order: the chat exists, user_id is a member of it,
        then the text is valid. Only then is a sequence number assigned.

        Args:
            chat_id: Target chat
            user_id: User name of the sending member
            text: Message text, stored verbatim

        Returns:
            ServiceResult with the stored Message (sequence, created_at)

        Error codes:
            CHAT_NOT_FOUND: Unknown chat
            USER_NOT_FOUND: user_id has not joined the chat
            INVALID_INPUT: Blank or oversized text
            INTERNAL: Storage failure
        """
        context = f"send_message chat={chat_id} user={user_id}"
        try:
            chat = ChatStore.get_chat(chat_id)
            author = ChatStore.get_member(chat.id, user_id)
            text = validate_message_text(text)
            message = MessageLog.append(chat.id, author, text)
        except (BaseApplicationError, DatabaseError) as exc:
            return cls._failure(exc, context)

        cls.get_logger().info(
            f"Message #{message.sequence} from '{author.user_name}' in chat {chat.id}"
        )
        return ServiceResult.success(message)

    @classmethod
    def get_messages(
        cls,
        chat_id,
        limit: int,
        cursor: str | None = None,
    ) -> ServiceResult[MessagesPage]:
        """
        Read one page of messages in ascending sequence order.

        Without a cursor the page starts at the first message. next_cursor
        is set only when more messages follow the page.

        Error codes:
            CHAT_NOT_FOUND: Unknown chat
            INVALID_INPUT: limit outside [PAGE_LIMIT_MIN, PAGE_LIMIT_MAX]
            INVALID_CURSOR: Malformed, tampered or foreign cursor
            INTERNAL: Storage failure
        """
        context = f"get_messages chat={chat_id}"
        codec = CursorCodec.from_settings()
        try:
            chat = ChatStore.get_chat(chat_id)
            limit = validate_page_limit(limit)

            after_sequence = 0
            if cursor:
                position = codec.decode(cursor)
                if position.chat_id != chat.id:
                    raise InvalidCursorError(
                        "Cursor was issued for a different chat",
                        details={"from": ["Cursor was issued for a different chat"]},
                    )
                after_sequence = position.sequence

            page = MessageLog.read_range(chat.id, after_sequence, limit)
        except (BaseApplicationError, DatabaseError) as exc:
            return cls._failure(exc, context)

        next_cursor = None
        if page.has_more and page.messages:
            next_cursor = codec.encode(chat.id, page.messages[-1].sequence)
        return ServiceResult.success(
            MessagesPage(messages=page.messages, next_cursor=next_cursor)
        )

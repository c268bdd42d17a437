"""
Per-chat append-only message log.

MessageLog assigns each message the next sequence number of its chat and
serves keyset range reads over that sequence.

Sequence assignment:
    1. Open a transaction and lock the chat row (select_for_update)
    2. Insert the message at last_sequence + 1 and advance the counter
    3. Commit; on any failure nothing is written and the counter stays put

The chat row is the per-chat serialization point: PostgreSQL blocks only
appends to the same chat, and SQLite serializes write transactions with
BEGIN IMMEDIATE. Reads never take the row lock.

Usage:
    from chat.log import MessageLog

    message = MessageLog.append(chat.id, member, "hello")
    page = MessageLog.read_range(chat.id, after_sequence=0, limit=50)
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from django.db import DatabaseError, IntegrityError, OperationalError

from core.helpers import run_with_retry
from core.services import BaseService

from chat.constants import chat_setting
from chat.exceptions import ChatNotFoundError, StorageError
from chat.models import Chat, Member, Message
from chat.store import parse_chat_id


@dataclass
class MessagePage:
    """Messages in ascending sequence order, and whether more follow."""

    messages: list[Message] = field(default_factory=list)
    has_more: bool = False


class MessageLog(BaseService):
    """
    Append and range-read operations on a chat's message log.

    Methods:
        append: Store a message at the next sequence number
        read_range: Read messages after a sequence number
    """

    @classmethod
    def append(cls, chat_id, author: Member, text: str) -> Message:
        """
        Append a message to a chat.

        Args:
            chat_id: Target chat
            author: Member sending the message (already verified)
            text: Validated message text

        Returns:
            The stored Message with its sequence number and timestamp

        Raises:
            ChatNotFoundError: Unknown or malformed chat id
            StorageError: Storage failure after retries
        """
        chat_uuid = parse_chat_id(chat_id)
        if chat_uuid is None:
            raise ChatNotFoundError(
                f"Chat {chat_id} not found",
                details={"chat_id": str(chat_id)},
            )

        logger = cls.get_logger()
        try:
            message = run_with_retry(
                lambda: cls._append_once(chat_uuid, author, text),
                attempts=chat_setting("STORAGE_RETRY_ATTEMPTS"),
                delay=chat_setting("STORAGE_RETRY_DELAY_SECONDS"),
                retry_on=(OperationalError, IntegrityError),
            )
        except DatabaseError as exc:
            raise StorageError(f"Failed to append to chat {chat_uuid}") from exc

        logger.debug(f"Appended message #{message.sequence} to chat {chat_uuid}")
        return message

    @classmethod
    def _append_once(cls, chat_uuid: uuid.UUID, author: Member, text: str) -> Message:
        with cls.atomic():
            chat = Chat.objects.select_for_update().filter(pk=chat_uuid).first()
            if chat is None:
                raise ChatNotFoundError(
                    f"Chat {chat_uuid} not found",
                    details={"chat_id": str(chat_uuid)},
                )

            sequence = chat.last_sequence + 1
            message = Message.objects.create(
                chat=chat,
                sequence=sequence,
                author=author,
                text=text,
            )
            Chat.objects.filter(pk=chat.pk).update(last_sequence=sequence)
        return message

    @classmethod
    def read_range(cls, chat_id, after_sequence: int = 0, limit: int = 50) -> MessagePage:
        """
        Read up to limit messages with sequence greater than after_sequence.

        One extra row is fetched to tell whether another page exists.

        Raises:
            ChatNotFoundError: Unknown or malformed chat id
            StorageError: Storage failure after retries
        """
        chat_uuid = parse_chat_id(chat_id)
        if chat_uuid is None:
            raise ChatNotFoundError(
                f"Chat {chat_id} not found",
                details={"chat_id": str(chat_id)},
            )

        def fetch() -> tuple[bool, list[Message]]:
            if not Chat.objects.filter(pk=chat_uuid).exists():
                return False, []
            rows = (
                Message.objects.filter(chat_id=chat_uuid, sequence__gt=after_sequence)
                .select_related("author")
                .order_by("sequence")[: limit + 1]
            )
            return True, list(rows)

        try:
            found, rows = run_with_retry(
                fetch,
                attempts=chat_setting("STORAGE_RETRY_ATTEMPTS"),
                delay=chat_setting("STORAGE_RETRY_DELAY_SECONDS"),
                retry_on=(OperationalError,),
            )
        except DatabaseError as exc:
            raise StorageError(f"Failed to read chat {chat_uuid}") from exc

        if not found:
            raise ChatNotFoundError(
                f"Chat {chat_id} not found",
                details={"chat_id": str(chat_id)},
            )

        has_more = len(rows) > limit
        return MessagePage(messages=rows[:limit], has_more=has_more)

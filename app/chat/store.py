"""
Chat and membership state.

ChatStore owns chat existence and the set of user names joined to each
chat. It raises chat exceptions for expected failures; ChatService turns
them into ServiceResult values.

Usage:
    from chat.store import ChatStore

    chat = ChatStore.create_chat("team")
    outcome = ChatStore.add_member(chat.id, "alice")
    ChatStore.is_member(chat.id, "alice")  # True
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from django.db import DatabaseError, IntegrityError

from core.helpers import validate_uuid
from core.services import BaseService

from chat.constants import JoinPolicy, chat_setting
from chat.exceptions import (
    AlreadyMemberError,
    ChatNotFoundError,
    StorageError,
    UserNotFoundError,
)
from chat.models import Chat, Member
from chat.validators import chat_name_policy, user_name_policy, validate_name


@dataclass(frozen=True)
class JoinOutcome:
    """Result of add_member: the membership and whether this call created it."""

    member: Member
    created: bool


def parse_chat_id(chat_id) -> uuid.UUID | None:
    """Return chat_id as a UUID, or None if it cannot name any chat."""
    if isinstance(chat_id, uuid.UUID):
        return chat_id
    if not validate_uuid(chat_id):
        return None
    return uuid.UUID(str(chat_id))


class ChatStore(BaseService):
    """
    Chat and membership operations.

    Methods:
        create_chat: Validate a name and persist a new chat
        chat_exists: Check a chat id
        get_chat: Load a chat or raise ChatNotFoundError
        add_member: Join a user name to a chat
        is_member: Check membership of a user name
        get_member: Load a membership or raise UserNotFoundError
    """

    @classmethod
    def create_chat(cls, name: str) -> Chat:
        """
        Create a chat with a server-generated id.

        Raises:
            InvalidInputError: Name violates the chat name policy
            StorageError: Database failure
        """
        name = validate_name(name, chat_name_policy(), field="chat_name")
        try:
            chat = Chat.objects.create(name=name)
        except DatabaseError as exc:
            raise StorageError("Failed to create chat") from exc

        cls.get_logger().info(f"Created chat {chat.id} named '{name}'")
        return chat

    @classmethod
    def chat_exists(cls, chat_id) -> bool:
        chat_uuid = parse_chat_id(chat_id)
        if chat_uuid is None:
            return False
        try:
            return Chat.objects.filter(pk=chat_uuid).exists()
        except DatabaseError as exc:
            raise StorageError("Failed to look up chat") from exc

    @classmethod
    def get_chat(cls, chat_id) -> Chat:
        """
        Load a chat.

        Raises:
            ChatNotFoundError: Unknown or malformed chat id
            StorageError: Database failure
        """
        chat_uuid = parse_chat_id(chat_id)
        try:
            chat = Chat.objects.filter(pk=chat_uuid).first() if chat_uuid else None
        except DatabaseError as exc:
            raise StorageError("Failed to look up chat") from exc
        if chat is None:
            raise ChatNotFoundError(
                f"Chat {chat_id} not found",
                details={"chat_id": str(chat_id)},
            )
        return chat

    @classmethod
    def add_member(cls, chat_id, user_name: str) -> JoinOutcome:
        """
        Join user_name to a chat.

        The chat row is locked while the membership is written, so the
        existence check and the insert form one step with respect to any
        concurrent change to the chat.

        Repeated joins follow DUPLICATE_JOIN_POLICY:
            idempotent: return the existing member with created=False
            reject: raise AlreadyMemberError

        Raises:
            ChatNotFoundError: Unknown or malformed chat id
            InvalidInputError: User name violates the user name policy
            AlreadyMemberError: Repeated join under the "reject" policy
            StorageError: Database failure
        """
        user_name = validate_name(user_name, user_name_policy(), field="user_name")
        policy = chat_setting("DUPLICATE_JOIN_POLICY")
        chat_uuid = parse_chat_id(chat_id)

        try:
            with cls.atomic():
                chat = (
                    Chat.objects.select_for_update().filter(pk=chat_uuid).first()
                    if chat_uuid
                    else None
                )
                if chat is None:
                    raise ChatNotFoundError(
                        f"Chat {chat_id} not found",
                        details={"chat_id": str(chat_id)},
                    )

                existing = Member.objects.filter(chat=chat, user_name=user_name).first()
                if existing is None:
                    member = cls._insert_member(chat, user_name)
                    created = member is not None
                    if member is None:
                        existing = Member.objects.get(chat=chat, user_name=user_name)
                else:
                    created = False
        except DatabaseError as exc:
            raise StorageError("Failed to add member") from exc

        if not created:
            if policy == JoinPolicy.REJECT:
                raise AlreadyMemberError(
                    f"User '{user_name}' is already a member of chat {chat_id}",
                    details={"chat_id": str(chat_id), "user_name": user_name},
                )
            cls.get_logger().debug(
                f"User '{user_name}' already in chat {chat_id}, returning member {existing.id}"
            )
            return JoinOutcome(member=existing, created=False)

        cls.get_logger().info(f"User '{user_name}' joined chat {chat_id} as {member.id}")
        return JoinOutcome(member=member, created=True)

    @classmethod
    def _insert_member(cls, chat: Chat, user_name: str) -> Member | None:
        """Insert a membership; None if a concurrent join won the unique constraint."""
        try:
            with cls.atomic():
                return Member.objects.create(chat=chat, user_name=user_name)
        except IntegrityError:
            return None

    @classmethod
    def is_member(cls, chat_id, user_name: str) -> bool:
        chat_uuid = parse_chat_id(chat_id)
        if chat_uuid is None or not isinstance(user_name, str):
            return False
        try:
            return Member.objects.filter(
                chat_id=chat_uuid, user_name=user_name.strip()
            ).exists()
        except DatabaseError as exc:
            raise StorageError("Failed to look up member") from exc

    @classmethod
    def get_member(cls, chat_id, user_name: str) -> Member:
        """
        Load the membership of user_name in a chat.

        Raises:
            UserNotFoundError: user_name has not joined the chat
            StorageError: Database failure
        """
        chat_uuid = parse_chat_id(chat_id)
        member = None
        if chat_uuid is not None and isinstance(user_name, str):
            try:
                member = Member.objects.filter(
                    chat_id=chat_uuid, user_name=user_name.strip()
                ).first()
            except DatabaseError as exc:
                raise StorageError("Failed to look up member") from exc
        if member is None:
            raise UserNotFoundError(
                f"User '{user_name}' is not a member of chat {chat_id}",
                details={"chat_id": str(chat_id), "user_name": str(user_name)},
            )
        return member

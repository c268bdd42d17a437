"""
Chat system models.

This module defines the data models for the chat system:
- Chats created by name, identified by a server-generated UUID
- Members: user names joined to a chat (users exist only as members)
- Messages: an append-only, gapless, per-chat sequence

Models:
    Chat: Named container for members and messages, owns the sequence counter
    Member: User name joined to a chat
    Message: Immutable message with a per-chat sequence number

Design Decisions:
    - Sequence numbers start at 1 and are assigned from Chat.last_sequence
      inside the same transaction that inserts the message
    - UniqueConstraint(chat, sequence) backs the gapless ordering guarantee
    - Message ordering is by sequence only, never by timestamp
    - Members and messages are never removed or edited
"""

from __future__ import annotations

from django.db import models

from core.models import BaseModel
from core.model_mixins import UUIDPrimaryKeyMixin


class Chat(UUIDPrimaryKeyMixin, BaseModel):
    """
    A named chat.

    Fields:
        name: Display name chosen at creation
        last_sequence: Sequence number of the newest message (0 when empty)

    Relationships:
        members: All Member records for this chat
        messages: All Message records for this chat

    Note:
        last_sequence is only advanced by MessageLog.append while the chat
        row is locked. Do not update it anywhere else.
    """

    name = models.CharField(
        max_length=255,
        help_text="Display name of the chat",
    )

    last_sequence = models.PositiveBigIntegerField(
        default=0,
        help_text="Sequence number of the most recent message (0 if none)",
    )

    class Meta:
        db_table = "chat_chat"
        ordering = ["created_at"]

    def __str__(self) -> str:
        """Return human-readable representation."""
        return f"Chat: {self.name} ({self.pk})"


class Member(UUIDPrimaryKeyMixin, BaseModel):
    """
    A user name joined to a chat.

    The member id (UUID) is what JoinUser returns. The user name is
    unique within its chat and is how message authors are identified.

    Fields:
        chat: Chat this membership belongs to
        user_name: Name of the user, unique per chat
        created_at: Join time

    Constraints:
        - UniqueConstraint(chat, user_name): one membership per name per chat
    """

    chat = models.ForeignKey(
        Chat,
        on_delete=models.CASCADE,
        related_name="members",
        help_text="Chat this member belongs to",
    )

    user_name = models.CharField(
        max_length=255,
        help_text="User name, unique within the chat",
    )

    class Meta:
        db_table = "chat_member"
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["chat", "user_name"],
                name="unique_chat_member_name",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        return f"Member: {self.user_name} in {self.chat_id}"


class Message(UUIDPrimaryKeyMixin, BaseModel):
    """
    A message appended to a chat's log.

    Fields:
        chat: Chat this message belongs to
        sequence: Per-chat position, starting at 1, gapless
        author: Member who sent the message
        text: Message payload
        created_at: Server-assigned timestamp

    Constraints:
        - UniqueConstraint(chat, sequence): no two messages share a position

    Note:
        Create messages through MessageLog.append only; it owns sequence
        assignment.
    """

    chat = models.ForeignKey(
        Chat,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Chat this message belongs to",
    )

    sequence = models.PositiveBigIntegerField(
        help_text="Position in the chat's message log (starts at 1)",
    )

    author = models.ForeignKey(
        Member,
        on_delete=models.PROTECT,
        related_name="messages",
        help_text="Member who sent this message",
    )

    text = models.TextField(
        help_text="Message text",
    )

    class Meta:
        db_table = "chat_message"
        ordering = ["chat", "sequence"]
        constraints = [
            models.UniqueConstraint(
                fields=["chat", "sequence"],
                name="unique_chat_message_sequence",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        preview = self.text[:50] + "..." if len(self.text) > 50 else self.text
        return f"#{self.sequence} {self.author_id}: {preview}"

    @property
    def user_id(self) -> str:
        """User name of the author, as exposed to clients."""
        return self.author.user_name

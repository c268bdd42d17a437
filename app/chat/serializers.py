"""
Serializers for chat API.

This module provides serializers for the chat REST endpoints:
- Request shape checks (presence and type of fields)
- Response rendering for chats, members and messages

Serializer Hierarchy:
    ChatCreateSerializer: Body of POST /chats/
    ChatCreatedSerializer: Response with the new chat id

    JoinUserSerializer: Body of POST /chats/{chat_id}/users/
    MemberSerializer: Response with the member id and user name

    MessageCreateSerializer: Body of POST /chats/{chat_id}/messages/
    SendMessageQuerySerializer: user_id query parameter of the same request
    MessageCreatedSerializer: Response with sequence number and timestamp

    MessageListQuerySerializer: limit / from query parameters of GET
    MessageSerializer: One message in a page
    MessagePageSerializer: Page of messages plus the next cursor

Design Decisions:
    - Serializers only check shape; name, text and limit policies are
      enforced by ChatService so every caller gets the same error codes
    - Text is never trimmed; messages are stored verbatim
    - Messages expose user_id as the author's user name
"""

from __future__ import annotations

from rest_framework import serializers

from chat.models import Member, Message


# =============================================================================
# Chats
# =============================================================================


class ChatCreateSerializer(serializers.Serializer):
    """Request body for creating a chat."""

    chat_name = serializers.CharField(allow_blank=True, trim_whitespace=False)


class ChatCreatedSerializer(serializers.Serializer):
    chat_id = serializers.UUIDField(source="id", read_only=True)


# =============================================================================
# Members
# =============================================================================


class JoinUserSerializer(serializers.Serializer):
    """Request body for joining a user to a chat."""

    user_name = serializers.CharField(allow_blank=True, trim_whitespace=False)


class MemberSerializer(serializers.ModelSerializer):
    """
    Serializer for a chat membership.

    user_id is the member id returned by the join operation.
    """

    user_id = serializers.UUIDField(source="id", read_only=True)

    class Meta:
        model = Member
        fields = ["user_id", "user_name"]
        read_only_fields = fields


# =============================================================================
# Messages
# =============================================================================


class MessageBodySerializer(serializers.Serializer):
    text = serializers.CharField(allow_blank=True, trim_whitespace=False)


class MessageCreateSerializer(serializers.Serializer):
    """
    Request body for sending a message.

    Example:
        {"message": {"text": "hello"}}
    """

    message = MessageBodySerializer()


class SendMessageQuerySerializer(serializers.Serializer):
    user_id = serializers.CharField(trim_whitespace=False)


class MessageCreatedSerializer(serializers.ModelSerializer):
    """Response for a sent message."""

    message_id = serializers.UUIDField(source="id", read_only=True)
    sequence_number = serializers.IntegerField(source="sequence", read_only=True)
    timestamp = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Message
        fields = ["message_id", "sequence_number", "timestamp"]
        read_only_fields = fields


class MessageListQuerySerializer(serializers.Serializer):
    """
    Query parameters for listing messages.

    limit: Maximum number of messages in the page (range checked by the service)
    from: Cursor returned as next.iterator by the previous page
    """

    limit = serializers.IntegerField()

    # "from" is a Python keyword, so the field is declared in __init__
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["from"] = serializers.CharField(
            required=False, allow_blank=True, trim_whitespace=False
        )


class MessageSerializer(serializers.ModelSerializer):
    """One message as returned by GET /chats/{chat_id}/messages/."""

    sequence_number = serializers.IntegerField(source="sequence", read_only=True)
    user_id = serializers.CharField(source="author.user_name", read_only=True)
    timestamp = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Message
        fields = ["sequence_number", "user_id", "text", "timestamp"]
        read_only_fields = fields


class MessagePageSerializer(serializers.Serializer):
    """
    A page of messages.

    Output:
        {"messages": [...], "next": {"iterator": "<cursor>"}}

    next is omitted on the last page.
    """

    messages = MessageSerializer(many=True, read_only=True)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if instance.next_cursor:
            data["next"] = {"iterator": instance.next_cursor}
        return data

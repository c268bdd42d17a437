"""
Views for chat API.

This module provides REST API endpoints for the chat system:
- ChatCreateView: Create a chat
- ChatUserView: Join a user to a chat
- ChatMessagesView: Send messages and page through them

URL Structure:
    /api/v1/chats/                        POST
    /api/v1/chats/{chat_id}/users/        POST
    /api/v1/chats/{chat_id}/messages/     GET, POST

Design Decisions:
    - Views only parse the request and render the result; all checks and
      state changes happen in ChatService
    - Failures use one body shape: {"success": false, "error",
      "error_code", "errors"?}
    - HTTP status is derived from the service error code
    - chat_id is taken as a plain string so malformed ids report
      CHAT_NOT_FOUND like unknown ones
"""

from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from core.services import ServiceResult

from chat.constants import ErrorCode
from chat.serializers import (
    ChatCreatedSerializer,
    ChatCreateSerializer,
    JoinUserSerializer,
    MemberSerializer,
    MessageCreatedSerializer,
    MessageCreateSerializer,
    MessageListQuerySerializer,
    MessagePageSerializer,
    SendMessageQuerySerializer,
)
from chat.services import ChatService

ERROR_STATUS = {
    ErrorCode.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_CURSOR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.CHAT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.ALREADY_MEMBER: status.HTTP_409_CONFLICT,
    ErrorCode.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(result: ServiceResult) -> Response:
    """Render a failed ServiceResult with the status for its error code."""
    return Response(
        result.to_response(),
        status=ERROR_STATUS.get(
            result.error_code, status.HTTP_500_INTERNAL_SERVER_ERROR
        ),
    )


def invalid_input_response(errors) -> Response:
    """Render serializer errors as an INVALID_INPUT failure."""
    return error_response(
        ServiceResult.failure(
            "Invalid input",
            error_code=ErrorCode.INVALID_INPUT,
            errors=errors,
        )
    )


class ChatCreateView(APIView):
    """
    Create a chat.

    POST /api/v1/chats/
        Body: {"chat_name": "team"}
        Returns: {"chat_id": "<uuid>"}
    """

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="create_chat",
        summary="Create chat",
        request=ChatCreateSerializer,
        responses={
            201: ChatCreatedSerializer,
            400: OpenApiResponse(description="Chat name violates the name policy"),
        },
        tags=["Chats"],
    )
    def post(self, request):
        serializer = ChatCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_input_response(serializer.errors)

        result = ChatService.create_chat(serializer.validated_data["chat_name"])
        if not result.success:
            return error_response(result)

        return Response(
            ChatCreatedSerializer(result.data).data,
            status=status.HTTP_201_CREATED,
        )


class ChatUserView(APIView):
    """
    Join a user to a chat.

    POST /api/v1/chats/{chat_id}/users/
        Body: {"user_name": "alice"}
        Returns: {"user_id": "<member uuid>", "user_name": "alice", "created": true}

    A repeated join returns the existing member with 200 and created=false,
    unless DUPLICATE_JOIN_POLICY is "reject" (409 ALREADY_MEMBER).
    """

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="join_chat",
        summary="Join user to chat",
        request=JoinUserSerializer,
        responses={
            201: MemberSerializer,
            200: OpenApiResponse(
                response=MemberSerializer,
                description="User was already a member",
            ),
            400: OpenApiResponse(description="User name violates the name policy"),
            404: OpenApiResponse(description="Chat not found"),
            409: OpenApiResponse(description="Already a member (reject policy)"),
        },
        tags=["Chats"],
    )
    def post(self, request, chat_id):
        serializer = JoinUserSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_input_response(serializer.errors)

        result = ChatService.join_user(chat_id, serializer.validated_data["user_name"])
        if not result.success:
            return error_response(result)

        outcome = result.data
        data = MemberSerializer(outcome.member).data
        data["created"] = outcome.created
        return Response(
            data,
            status=status.HTTP_201_CREATED if outcome.created else status.HTTP_200_OK,
        )


class ChatMessagesView(APIView):
    """
    Send and list messages of a chat.

    POST /api/v1/chats/{chat_id}/messages/?user_id=alice
        Body: {"message": {"text": "hello"}}
        Returns: {"message_id", "sequence_number", "timestamp"}

    GET /api/v1/chats/{chat_id}/messages/?limit=50&from=<cursor>
        Returns: {"messages": [...], "next": {"iterator": "<cursor>"}}
    """

    permission_classes = [AllowAny]

    @extend_schema(
        operation_id="send_message",
        summary="Send message",
        parameters=[
            OpenApiParameter(
                name="user_id",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=True,
                description="User name of the sending member",
            ),
        ],
        request=MessageCreateSerializer,
        responses={
            201: MessageCreatedSerializer,
            400: OpenApiResponse(description="Blank or oversized text"),
            404: OpenApiResponse(description="Chat or member not found"),
        },
        tags=["Messages"],
    )
    def post(self, request, chat_id):
        query = SendMessageQuerySerializer(data=request.query_params)
        body = MessageCreateSerializer(data=request.data)
        query_valid = query.is_valid()
        body_valid = body.is_valid()
        if not (query_valid and body_valid):
            return invalid_input_response({**query.errors, **body.errors})

        result = ChatService.send_message(
            chat_id,
            query.validated_data["user_id"],
            body.validated_data["message"]["text"],
        )
        if not result.success:
            return error_response(result)

        return Response(
            MessageCreatedSerializer(result.data).data,
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        operation_id="list_messages",
        summary="List messages",
        description=(
            "Return up to `limit` messages in ascending sequence order. Pass the "
            "`next.iterator` value of a page as `from` to get the following page. "
            "`next` is absent on the last page."
        ),
        parameters=[
            OpenApiParameter(
                name="limit",
                type=OpenApiTypes.INT,
                location=OpenApiParameter.QUERY,
                required=True,
                description="Maximum number of messages (1-1000)",
            ),
            OpenApiParameter(
                name="from",
                type=OpenApiTypes.STR,
                location=OpenApiParameter.QUERY,
                required=False,
                description="Opaque cursor from a previous page",
            ),
        ],
        responses={
            200: MessagePageSerializer,
            400: OpenApiResponse(description="Invalid limit or cursor"),
            404: OpenApiResponse(description="Chat not found"),
        },
        tags=["Messages"],
    )
    def get(self, request, chat_id):
        query = MessageListQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return invalid_input_response(query.errors)

        result = ChatService.get_messages(
            chat_id,
            limit=query.validated_data["limit"],
            cursor=query.validated_data.get("from") or None,
        )
        if not result.success:
            return error_response(result)

        return Response(MessagePageSerializer(result.data).data)

"""
Tests for ChatService.

This module tests the orchestration layer:
- ServiceResult success/failure states and error codes
- Check order for send_message and get_messages
- Cursor paging across the whole log
- Storage failures surfacing as INTERNAL

Test Organization:
    - Each service method has its own test class
    - Tests use descriptive names following: test_<scenario>_<expected_outcome>
"""

import logging
import uuid
from unittest.mock import patch

import pytest
from django.db import OperationalError
from freezegun import freeze_time

from chat.constants import ErrorCode, JoinPolicy
from chat.cursors import CursorCodec
from chat.models import Message
from chat.services import ChatService


# =============================================================================
# create_chat / join_user
# =============================================================================


@pytest.mark.django_db
class TestCreateChat:
    """Tests for ChatService.create_chat()."""

    def test_returns_new_chat(self):
        result = ChatService.create_chat("team")

        assert result.success is True
        assert result.data.name == "team"

    def test_invalid_name_fails_with_invalid_input(self):
        result = ChatService.create_chat("x" * 500)

        assert result.success is False
        assert result.error_code == ErrorCode.INVALID_INPUT
        assert "chat_name" in result.errors


@pytest.mark.django_db
class TestJoinUser:
    """Tests for ChatService.join_user()."""

    def test_returns_member(self, chat):
        result = ChatService.join_user(chat.id, "alice")

        assert result.success is True
        assert result.data.created is True
        assert result.data.member.user_name == "alice"

    def test_unknown_chat_fails_with_chat_not_found(self):
        result = ChatService.join_user(uuid.uuid4(), "alice")

        assert result.error_code == ErrorCode.CHAT_NOT_FOUND

    def test_invalid_user_name_fails_with_invalid_input(self, chat):
        result = ChatService.join_user(chat.id, "   ")

        assert result.error_code == ErrorCode.INVALID_INPUT

    def test_repeat_join_returns_same_member(self, chat):
        first = ChatService.join_user(chat.id, "alice")
        second = ChatService.join_user(chat.id, "alice")

        assert second.success is True
        assert second.data.created is False
        assert second.data.member.id == first.data.member.id

    def test_repeat_join_rejected_under_reject_policy(self, chat, chat_settings):
        chat_settings(DUPLICATE_JOIN_POLICY=JoinPolicy.REJECT)
        ChatService.join_user(chat.id, "alice")

        result = ChatService.join_user(chat.id, "alice")

        assert result.success is False
        assert result.error_code == ErrorCode.ALREADY_MEMBER


# =============================================================================
# send_message
# =============================================================================


@pytest.mark.django_db
class TestSendMessage:
    """Tests for ChatService.send_message()."""

    def test_assigns_sequence_and_timestamp(self, chat, alice):
        with freeze_time("2024-01-15 12:00:00"):
            result = ChatService.send_message(chat.id, "alice", "hello")

        assert result.success is True
        assert result.data.sequence == 1
        assert result.data.created_at.isoformat() == "2024-01-15T12:00:00+00:00"

    def test_unknown_chat_checked_first(self):
        result = ChatService.send_message(uuid.uuid4(), "nobody", "")

        assert result.error_code == ErrorCode.CHAT_NOT_FOUND

    def test_non_member_checked_before_text(self, chat, alice):
        result = ChatService.send_message(chat.id, "carol", "")

        assert result.error_code == ErrorCode.USER_NOT_FOUND
        assert not Message.objects.exists()

    def test_member_of_other_chat_is_not_found(self, chat, other_chat):
        ChatService.join_user(other_chat.id, "alice")

        result = ChatService.send_message(chat.id, "alice", "hi")

        assert result.error_code == ErrorCode.USER_NOT_FOUND

    def test_blank_text_fails_with_invalid_input(self, chat, alice):
        result = ChatService.send_message(chat.id, "alice", "   ")

        assert result.error_code == ErrorCode.INVALID_INPUT
        assert result.errors == {"text": ["Message text cannot be empty"]}
        chat.refresh_from_db()
        assert chat.last_sequence == 0

    def test_oversized_text_fails_with_invalid_input(self, chat, alice, chat_settings):
        chat_settings(MESSAGE_MAX_LENGTH=5)

        result = ChatService.send_message(chat.id, "alice", "too long")

        assert result.error_code == ErrorCode.INVALID_INPUT

    def test_storage_failure_reported_as_internal(
        self, chat, alice, no_retry_delay, caplog
    ):
        with patch.object(
            Message.objects, "create", side_effect=OperationalError("database is locked")
        ):
            with caplog.at_level(logging.ERROR, logger="chat.services"):
                result = ChatService.send_message(chat.id, "alice", "hello")

        assert result.success is False
        assert result.error_code == ErrorCode.INTERNAL
        assert any(record.exc_info for record in caplog.records)

    def test_domain_failures_are_not_logged_as_errors(self, chat, caplog):
        with caplog.at_level(logging.INFO, logger="chat.services"):
            ChatService.send_message(chat.id, "carol", "hi")

        assert all(record.levelno < logging.ERROR for record in caplog.records)


# =============================================================================
# get_messages
# =============================================================================


@pytest.mark.django_db
class TestGetMessages:
    """Tests for ChatService.get_messages()."""

    def test_first_page_without_cursor(self, filled_chat):
        result = ChatService.get_messages(filled_chat.id, limit=2)

        assert result.success is True
        assert [m.sequence for m in result.data.messages] == [1, 2]
        assert result.data.next_cursor is not None

    def test_cursor_walk_returns_every_message_once(self, filled_chat):
        seen = []
        cursor = None
        pages = 0

        while True:
            result = ChatService.get_messages(filled_chat.id, limit=2, cursor=cursor)
            assert result.success is True
            seen.extend(m.sequence for m in result.data.messages)
            pages += 1
            cursor = result.data.next_cursor
            if cursor is None:
                break

        assert seen == [1, 2, 3, 4, 5]
        assert pages == 3

    def test_exact_fit_has_no_next_cursor(self, filled_chat):
        result = ChatService.get_messages(filled_chat.id, limit=5)

        assert len(result.data.messages) == 5
        assert result.data.next_cursor is None

    def test_empty_chat_returns_empty_page(self, chat):
        result = ChatService.get_messages(chat.id, limit=10)

        assert result.success is True
        assert result.data.messages == []
        assert result.data.next_cursor is None

    def test_cursor_sees_messages_appended_later(self, filled_chat, alice):
        first = ChatService.get_messages(filled_chat.id, limit=5)
        last = first.data.messages[-1].sequence
        cursor = CursorCodec.from_settings().encode(filled_chat.id, last)

        ChatService.send_message(filled_chat.id, "alice", "late")
        result = ChatService.get_messages(filled_chat.id, limit=5, cursor=cursor)

        assert [m.text for m in result.data.messages] == ["late"]

    def test_unknown_chat_checked_before_limit(self):
        result = ChatService.get_messages(uuid.uuid4(), limit=0)

        assert result.error_code == ErrorCode.CHAT_NOT_FOUND

    @pytest.mark.parametrize("limit", [0, 1001])
    def test_limit_out_of_range_fails_with_invalid_input(self, chat, limit):
        result = ChatService.get_messages(chat.id, limit=limit)

        assert result.error_code == ErrorCode.INVALID_INPUT

    def test_limit_checked_before_cursor(self, chat):
        result = ChatService.get_messages(chat.id, limit=0, cursor="garbage")

        assert result.error_code == ErrorCode.INVALID_INPUT

    def test_garbage_cursor_fails_with_invalid_cursor(self, chat):
        result = ChatService.get_messages(chat.id, limit=10, cursor="garbage")

        assert result.error_code == ErrorCode.INVALID_CURSOR

    def test_cursor_from_other_chat_is_rejected(self, filled_chat, other_chat):
        cursor = ChatService.get_messages(filled_chat.id, limit=2).data.next_cursor

        result = ChatService.get_messages(other_chat.id, limit=2, cursor=cursor)

        assert result.success is False
        assert result.error_code == ErrorCode.INVALID_CURSOR

    def test_failure_response_shape(self, chat):
        response = ChatService.get_messages(chat.id, limit=10, cursor="garbage").to_response()

        assert response["success"] is False
        assert response["error_code"] == ErrorCode.INVALID_CURSOR
        assert response["error"]

"""
Tests for MessageLog.

Verifies sequence assignment, keyset range reads, retries of transient
storage errors and rollback on failure.
"""

import uuid
from unittest.mock import patch

import pytest
from django.db import DatabaseError, OperationalError

from chat.constants import ErrorCode
from chat.exceptions import ChatNotFoundError, StorageError
from chat.log import MessageLog
from chat.models import Chat, Message


@pytest.mark.django_db
class TestAppend:
    """Tests for MessageLog.append()."""

    def test_first_message_gets_sequence_one(self, chat, alice):
        message = MessageLog.append(chat.id, alice, "hello")

        chat.refresh_from_db()
        assert message.sequence == 1
        assert chat.last_sequence == 1
        assert message.created_at is not None

    def test_sequences_are_contiguous(self, chat, alice, bob):
        sequences = [
            MessageLog.append(chat.id, author, f"m{n}").sequence
            for n, author in enumerate([alice, bob, alice, bob])
        ]

        assert sequences == [1, 2, 3, 4]

    def test_chats_have_independent_sequences(self, chat, alice, other_chat):
        from chat.tests.factories import MemberFactory

        carol = MemberFactory(chat=other_chat, user_name="carol")
        MessageLog.append(chat.id, alice, "a")
        MessageLog.append(chat.id, alice, "b")

        message = MessageLog.append(other_chat.id, carol, "c")

        assert message.sequence == 1

    def test_text_is_stored_verbatim(self, chat, alice):
        message = MessageLog.append(chat.id, alice, "  spaced\n")

        message.refresh_from_db()
        assert message.text == "  spaced\n"

    def test_unknown_chat_raises_not_found(self, alice):
        with pytest.raises(ChatNotFoundError):
            MessageLog.append(uuid.uuid4(), alice, "hello")

    def test_chat_row_is_locked_while_assigning(self, chat, alice):
        with patch.object(
            Chat.objects, "select_for_update", wraps=Chat.objects.select_for_update
        ) as spy:
            MessageLog.append(chat.id, alice, "hello")

        spy.assert_called_once_with()


@pytest.mark.django_db
class TestAppendFailures:
    """Tests for retries and rollback in append()."""

    def test_transient_error_is_retried(self, chat, alice, no_retry_delay):
        real_create = Message.objects.create
        calls = []

        def flaky_create(**kwargs):
            calls.append(kwargs)
            if len(calls) == 1:
                raise OperationalError("database is locked")
            return real_create(**kwargs)

        with patch.object(Message.objects, "create", side_effect=flaky_create):
            message = MessageLog.append(chat.id, alice, "hello")

        assert len(calls) == 2
        assert message.sequence == 1

    def test_persistent_error_raises_storage_error(
        self, chat, alice, no_retry_delay, chat_settings
    ):
        chat_settings(STORAGE_RETRY_ATTEMPTS=3)

        with patch.object(
            Message.objects, "create", side_effect=OperationalError("database is locked")
        ) as mock_create:
            with pytest.raises(StorageError) as exc_info:
                MessageLog.append(chat.id, alice, "hello")

        assert mock_create.call_count == 3
        assert exc_info.value.error_code == ErrorCode.INTERNAL

    def test_failed_append_leaves_counter_unchanged(self, chat, alice, no_retry_delay):
        MessageLog.append(chat.id, alice, "first")

        # Insert succeeds but advancing the counter fails: nothing may stick
        with patch.object(Chat.objects, "filter", side_effect=DatabaseError("disk full")):
            with pytest.raises(StorageError):
                MessageLog.append(chat.id, alice, "lost")

        chat.refresh_from_db()
        assert chat.last_sequence == 1
        assert list(Message.objects.filter(chat=chat).values_list("text", flat=True)) == [
            "first"
        ]

        # The next successful append continues without a gap
        assert MessageLog.append(chat.id, alice, "second").sequence == 2


@pytest.mark.django_db
class TestReadRange:
    """Tests for MessageLog.read_range()."""

    def test_reads_from_start(self, filled_chat):
        page = MessageLog.read_range(filled_chat.id, after_sequence=0, limit=3)

        assert [m.sequence for m in page.messages] == [1, 2, 3]
        assert page.has_more is True

    def test_reads_after_sequence(self, filled_chat):
        page = MessageLog.read_range(filled_chat.id, after_sequence=3, limit=10)

        assert [m.text for m in page.messages] == ["m4", "m5"]
        assert page.has_more is False

    def test_exact_fit_has_no_more(self, filled_chat):
        page = MessageLog.read_range(filled_chat.id, after_sequence=0, limit=5)

        assert len(page.messages) == 5
        assert page.has_more is False

    def test_past_the_end_is_empty(self, filled_chat):
        page = MessageLog.read_range(filled_chat.id, after_sequence=5, limit=10)

        assert page.messages == []
        assert page.has_more is False

    def test_empty_chat_returns_empty_page(self, chat):
        page = MessageLog.read_range(chat.id, after_sequence=0, limit=10)

        assert page.messages == []
        assert page.has_more is False

    def test_unknown_chat_raises_not_found(self):
        with pytest.raises(ChatNotFoundError):
            MessageLog.read_range(uuid.uuid4(), after_sequence=0, limit=10)

    def test_authors_are_loaded(self, filled_chat, django_assert_num_queries):
        with django_assert_num_queries(2):
            page = MessageLog.read_range(filled_chat.id, after_sequence=0, limit=5)
            user_ids = [m.user_id for m in page.messages]

        assert user_ids == ["alice", "bob", "alice", "bob", "alice"]

    def test_does_not_read_other_chats(self, filled_chat, other_chat):
        from chat.tests.factories import MemberFactory, MessageFactory

        MessageFactory(author=MemberFactory(chat=other_chat))

        page = MessageLog.read_range(filled_chat.id, after_sequence=0, limit=100)

        assert {m.chat_id for m in page.messages} == {filled_chat.id}

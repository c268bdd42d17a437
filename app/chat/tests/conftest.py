"""
Test configuration and fixtures for chat tests.

This module provides:
- A chat with two members (alice, bob)
- Helpers to fill a chat's message log
- Cursor codec and API client fixtures
- Chat setting overrides

Usage:
    def test_example(chat, alice, api_client):
        response = api_client.get(f"/api/v1/chats/{chat.id}/messages/", {"limit": 10})
        assert response.status_code == 200
"""

import pytest
from rest_framework.test import APIClient

from chat.cursors import CursorCodec
from chat.tests.factories import ChatFactory, MemberFactory, MessageFactory


# =============================================================================
# Chat Fixtures
# =============================================================================


@pytest.fixture
def chat(db):
    """Create an empty chat named "team"."""
    return ChatFactory(name="team")


@pytest.fixture
def other_chat(db):
    """Create a second chat for isolation tests."""
    return ChatFactory(name="other")


@pytest.fixture
def alice(chat):
    """Alice is a member of the chat."""
    return MemberFactory(chat=chat, user_name="alice")


@pytest.fixture
def bob(chat):
    """Bob is a member of the chat."""
    return MemberFactory(chat=chat, user_name="bob")


@pytest.fixture
def filled_chat(chat, alice, bob):
    """
    Chat with five messages, alternating alice and bob.

    Texts are "m1".."m5" at sequences 1..5.
    """
    for number in range(1, 6):
        author = alice if number % 2 else bob
        MessageFactory(author=author, text=f"m{number}")
    chat.refresh_from_db()
    return chat


# =============================================================================
# Cursor and Settings Fixtures
# =============================================================================


@pytest.fixture
def codec():
    """Codec configured from settings (signed by default)."""
    return CursorCodec.from_settings()


@pytest.fixture
def chat_settings(settings):
    """
    Override chat settings for one test.

    Example:
        def test_reject(chat_settings):
            chat_settings(DUPLICATE_JOIN_POLICY="reject")
    """

    def override(**values):
        settings.CHAT = {**getattr(settings, "CHAT", {}), **values}

    return override


@pytest.fixture
def no_retry_delay(chat_settings):
    """Retry storage failures without sleeping."""
    chat_settings(STORAGE_RETRY_DELAY_SECONDS=0)


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client (the chat API is open)."""
    return APIClient()

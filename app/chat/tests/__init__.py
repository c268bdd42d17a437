"""
Tests for chat app.

This package contains test modules for:
- test_models.py: Chat, Member, Message model tests
- test_validators.py / test_cursors.py: Input policies and cursor tokens
- test_store.py / test_log.py: Membership and message log operations
- test_services.py: ChatService tests
- test_concurrency.py: Parallel writers on separate connections
- test_views.py / test_integration.py: REST API endpoint tests

Usage:
    pytest app/chat/tests/
    pytest app/chat/tests/test_concurrency.py
"""

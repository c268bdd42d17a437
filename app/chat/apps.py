"""
Chat application configuration.

This app provides the chat system with:
- Chats created by name
- Membership by user name
- Append-only message logs with per-chat sequence numbers
- Cursor pagination over message logs
"""

from django.apps import AppConfig


class ChatConfig(AppConfig):
    """Configuration for the chat application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "chat"
    verbose_name = "Chat"

"""
URL configuration for chat API.

URL Structure:
    /chats/                          POST
    /chats/{chat_id}/users/          POST
    /chats/{chat_id}/messages/       GET, POST

All URLs are prefixed with /api/v1/ in the main URL configuration.
"""

from django.urls import path

from chat.views import ChatCreateView, ChatMessagesView, ChatUserView

app_name = "chat"

urlpatterns = [
    path("chats/", ChatCreateView.as_view(), name="chat-create"),
    path("chats/<str:chat_id>/users/", ChatUserView.as_view(), name="chat-users"),
    path(
        "chats/<str:chat_id>/messages/",
        ChatMessagesView.as_view(),
        name="chat-messages",
    ),
]

"""
Django admin configuration for chat models.

Provides read-only admin interfaces for:
- Chat browsing with members inline
- Member lookup
- Message log inspection

Chats, members and messages are only written through ChatService, so
nothing here can add, change or delete records.
"""

from django.contrib import admin

from chat.models import Chat, Member, Message


class ReadOnlyAdminMixin:
    """Disable add, change and delete in the admin."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


class MemberInline(ReadOnlyAdminMixin, admin.TabularInline):
    """Inline display of members in chat admin."""

    model = Member
    extra = 0
    fields = ["user_name", "created_at"]
    readonly_fields = fields


@admin.register(Chat)
class ChatAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Admin interface for Chat model."""

    list_display = ["id", "name", "last_sequence", "created_at"]
    search_fields = ["name", "id"]
    readonly_fields = ["id", "name", "last_sequence", "created_at", "updated_at"]
    inlines = [MemberInline]
    ordering = ["-created_at"]


@admin.register(Member)
class MemberAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Admin interface for Member model."""

    list_display = ["id", "user_name", "chat", "created_at"]
    search_fields = ["user_name", "chat__name"]
    readonly_fields = ["id", "chat", "user_name", "created_at", "updated_at"]
    ordering = ["-created_at"]


@admin.register(Message)
class MessageAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Admin interface for Message model."""

    list_display = ["chat", "sequence", "author", "text_preview", "created_at"]
    list_filter = ["created_at"]
    search_fields = ["text", "author__user_name"]
    readonly_fields = ["id", "chat", "sequence", "author", "text", "created_at"]
    list_select_related = ["chat", "author"]
    ordering = ["chat", "sequence"]

    @admin.display(description="Text Preview")
    def text_preview(self, obj: Message) -> str:
        """Return truncated text for list display."""
        max_length = 50
        if len(obj.text) > max_length:
            return obj.text[:max_length] + "..."
        return obj.text

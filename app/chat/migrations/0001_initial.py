"""
Initial chat schema.

Creates:
    - Chat with the per-chat sequence counter
    - Member with one membership per user name per chat
    - Message with a unique (chat, sequence) position
"""

import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Chat",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "name",
                    models.CharField(
                        help_text="Display name of the chat",
                        max_length=255,
                    ),
                ),
                (
                    "last_sequence",
                    models.PositiveBigIntegerField(
                        default=0,
                        help_text="Sequence number of the most recent message (0 if none)",
                    ),
                ),
            ],
            options={
                "db_table": "chat_chat",
                "ordering": ["created_at"],
            },
        ),
        migrations.CreateModel(
            name="Member",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "user_name",
                    models.CharField(
                        help_text="User name, unique within the chat",
                        max_length=255,
                    ),
                ),
                (
                    "chat",
                    models.ForeignKey(
                        help_text="Chat this member belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="members",
                        to="chat.chat",
                    ),
                ),
            ],
            options={
                "db_table": "chat_member",
                "ordering": ["created_at"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("chat", "user_name"),
                        name="unique_chat_member_name",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Message",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        help_text="Unique identifier for this record",
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "sequence",
                    models.PositiveBigIntegerField(
                        help_text="Position in the chat's message log (starts at 1)",
                    ),
                ),
                (
                    "text",
                    models.TextField(help_text="Message text"),
                ),
                (
                    "author",
                    models.ForeignKey(
                        help_text="Member who sent this message",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="messages",
                        to="chat.member",
                    ),
                ),
                (
                    "chat",
                    models.ForeignKey(
                        help_text="Chat this message belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="messages",
                        to="chat.chat",
                    ),
                ),
            ],
            options={
                "db_table": "chat_message",
                "ordering": ["chat", "sequence"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("chat", "sequence"),
                        name="unique_chat_message_sequence",
                    ),
                ],
            },
        ),
    ]

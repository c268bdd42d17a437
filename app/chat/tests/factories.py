"""
Factory Boy factories for chat models.

Provides realistic test data generation for:
- Chat: Named chats with an empty log
- Member: User names joined to a chat
- Message: Messages placed at the chat's next sequence number

Usage:
    from chat.tests.factories import ChatFactory, MemberFactory, MessageFactory

    chat = ChatFactory(name="team")
    alice = MemberFactory(chat=chat, user_name="alice")

    # Lands at sequence 1, then 2; the chat counter follows
    MessageFactory(author=alice)
    MessageFactory(author=alice, text="second")
"""

import factory

from chat.models import Chat, Member, Message


class ChatFactory(factory.django.DjangoModelFactory):
    """
    Factory for Chat model.

    Examples:
        chat = ChatFactory()
        chat = ChatFactory(name="Project Team")
    """

    class Meta:
        model = Chat

    name = factory.Sequence(lambda n: f"Chat {n}")
    last_sequence = 0


class MemberFactory(factory.django.DjangoModelFactory):
    """Factory for Member model."""

    class Meta:
        model = Member

    chat = factory.SubFactory(ChatFactory)
    user_name = factory.Sequence(lambda n: f"user{n}")


class MessageFactory(factory.django.DjangoModelFactory):
    """
    Factory for Message model.

    Without an explicit sequence the message takes the chat's next number
    and the chat counter is advanced, mirroring MessageLog.append.

    Examples:
        message = MessageFactory(author=member)
        message = MessageFactory(author=member, text="Hello!")
    """

    class Meta:
        model = Message

    author = factory.SubFactory(MemberFactory)
    chat = factory.SelfAttribute("author.chat")
    text = factory.Faker("sentence")
    sequence = None

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        chat = kwargs["chat"]
        if kwargs.get("sequence") is None:
            chat.refresh_from_db(fields=["last_sequence"])
            kwargs["sequence"] = chat.last_sequence + 1

        message = super()._create(model_class, *args, **kwargs)

        if message.sequence > chat.last_sequence:
            Chat.objects.filter(pk=chat.pk).update(last_sequence=message.sequence)
            chat.last_sequence = message.sequence
        return message

"""
Chat app: chats, members and ordered message logs.

This app handles:
- Chat creation and membership
- Message sending with gapless per-chat sequence numbers
- Cursor-based paging through message history

Modules:
    store: Chat existence and membership (ChatStore)
    log: Sequence assignment and range reads (MessageLog)
    cursors: Opaque resume tokens (CursorCodec)
    services: Orchestration returning ServiceResult (ChatService)

Usage:
    from chat.services import ChatService

    chat = ChatService.create_chat("team").data
    ChatService.join_user(chat.id, "alice")
    ChatService.send_message(chat.id, "alice", "hello")
    page = ChatService.get_messages(chat.id, limit=10).data
"""

# ==============================================================================
# CHAT SERVICE - Direct Messages
# ==============================================================================

from __future__ import annotations

import logging
from typing import List, Optional

from smartcow.core.constants import Role, Topics, split_identity
from smartcow.database.factory import StorageContext
from smartcow.database.repositories.entities import CHAT_MESSAGES
from smartcow.schemas.community import ChatMessage, ChatMessageCreate
from smartcow.services.base_service import BaseService
from smartcow.utils.helpers import conversation_id, dedupe_keep_last, generate_id, utc_now

logger = logging.getLogger(__name__)


class ChatService(BaseService):
    """Append-only messages between role-qualified identities."""

    SYSTEM_NAME = "System"

    def __init__(self, context: StorageContext) -> None:
        super().__init__(context)
        self._repo = context.repository(CHAT_MESSAGES)

    async def send_message(
        self,
        sender: str,
        data: ChatMessageCreate,
        sender_role: Optional[str] = None,
    ) -> ChatMessage:
        """
        Append a message from ``sender`` to ``data.receiver_id``.

        Raises:
            DatabaseError: If no store accepted the write
        """
        sender_prefix, sender_username = split_identity(sender)
        receiver_prefix, receiver_username = split_identity(data.receiver_id)

        message = ChatMessage(
            id=generate_id("msg"),
            conversation_id=conversation_id(sender, data.receiver_id),
            sender_id=sender,
            sender_name=data.sender_name or sender_username,
            sender_role=sender_role or sender_prefix or "",
            receiver_id=data.receiver_id,
            receiver_name=data.receiver_name or receiver_username,
            receiver_role=receiver_prefix or "",
            message=data.message,
            created_at=utc_now(),
        )
        stored = self._require_stored(await self._repo.add(message), "chat message")
        self._notify(Topics.CHAT, {"conversationId": stored.conversation_id})
        return stored

    async def send_system_message(self, receiver: str, sender: str, text: str) -> ChatMessage:
        """Message shown to ``receiver`` as coming from the system on behalf of ``sender``."""
        return await self.send_message(
            sender,
            ChatMessageCreate(receiver_id=receiver, sender_name=self.SYSTEM_NAME, message=text),
            sender_role=Role.ADMIN.value,
        )

    async def get_conversation(self, first: str, second: str) -> List[ChatMessage]:
        """Messages between two identities, oldest first."""
        return await self._repo.list(conversation_id(first, second)) or []

    async def get_user_messages(self, user: str) -> List[ChatMessage]:
        """Every message sent or received by ``user``, oldest first."""
        sent = await self._repo.find(sender_id=user) or []
        received = await self._repo.find(receiver_id=user) or []
        merged = dedupe_keep_last(sent + received, "id")
        return sorted(merged, key=lambda m: m.created_at)

    async def count_received(self, user: str) -> int:
        return len(await self._repo.find(receiver_id=user) or [])

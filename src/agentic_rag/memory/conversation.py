"""Per-chat conversation windows.

A ``ConversationMemoryStore`` owns one bounded window per chat id, created on
first access. Windows hold whole question/answer turns, and the least recently
used idle chats are evicted once the store exceeds its chat limit. Requests on the same chat id are serialized through that chat's
lock; different chat ids never contend except briefly on window creation.
"""

from __future__ import annotations

import asyncio
from collections import OrderedDict, deque

from agentic_rag.models.domain import ChatMessage
from agentic_rag.observability.logger import get_logger

logger = get_logger("conversation_memory")


class ConversationMemory:
    def __init__(self, chat_id: str, max_messages: int = 20) -> None:
        self.chat_id = chat_id
        # Even and at least one turn, so eviction never splits a question from its answer
        window = max(2, max_messages - max_messages % 2)
        self._messages: deque[ChatMessage] = deque(maxlen=window)
        self.lock = asyncio.Lock()

    def messages(self) -> list[ChatMessage]:
        return list(self._messages)

    def record_turn(self, question: str, answer: str) -> None:
        """Append the question and its answer together."""
        self._messages.extend(
            (
                ChatMessage(role="user", content=question),
                ChatMessage(role="assistant", content=answer),
            )
        )

    def __len__(self) -> int:
        return len(self._messages)


class ConversationMemoryStore:
    def __init__(self, max_messages: int = 20, max_chats: int = 1000) -> None:
        self._max_messages = max_messages
        self._max_chats = max_chats
        self._memories: OrderedDict[str, ConversationMemory] = OrderedDict()
        self._lock = asyncio.Lock()

    async def get(self, chat_id: str) -> ConversationMemory:
        async with self._lock:
            memory = self._memories.get(chat_id)
            if memory is not None:
                self._memories.move_to_end(chat_id)
                return memory
            memory = ConversationMemory(chat_id, self._max_messages)
            self._memories[chat_id] = memory
            logger.info("conversation_created", chat_id=chat_id)
            self._evict(keep=chat_id)
            return memory

    def _evict(self, keep: str) -> None:
        # Chats with a request in flight are skipped
        excess = len(self._memories) - self._max_chats
        for chat_id in list(self._memories):
            if excess <= 0:
                break
            if chat_id == keep or self._memories[chat_id].lock.locked():
                continue
            del self._memories[chat_id]
            excess -= 1
            logger.info("conversation_evicted", chat_id=chat_id)

    def __len__(self) -> int:
        return len(self._memories)

"""Tests for per-chat conversation memory."""

import asyncio

from agentic_rag.memory.conversation import ConversationMemory, ConversationMemoryStore


async def test_memory_created_lazily_and_reused():
    store = ConversationMemoryStore(max_messages=4)
    assert len(store) == 0
    first = await store.get("chat-1")
    second = await store.get("chat-1")
    assert first is second
    assert len(store) == 1


async def test_turns_are_recorded_in_pairs():
    memory = ConversationMemory("c", max_messages=20)
    memory.record_turn("question", "answer")
    assert [(m.role, m.content) for m in memory.messages()] == [
        ("user", "question"),
        ("assistant", "answer"),
    ]


async def test_window_is_bounded():
    memory = ConversationMemory("c", max_messages=4)
    for i in range(5):
        memory.record_turn(f"q{i}", f"a{i}")
    assert [m.content for m in memory.messages()] == ["q3", "a3", "q4", "a4"]


async def test_chats_are_isolated():
    store = ConversationMemoryStore()
    (await store.get("a")).record_turn("qa", "aa")
    assert (await store.get("b")).messages() == []


def test_odd_window_keeps_whole_turns():
    memory = ConversationMemory("c", max_messages=5)
    for i in range(3):
        memory.record_turn(f"q{i}", f"a{i}")
    assert [m.role for m in memory.messages()] == ["user", "assistant"] * 2
    assert memory.messages()[0].content == "q1"


def test_window_holds_at_least_one_turn():
    memory = ConversationMemory("c", max_messages=1)
    memory.record_turn("q", "a")
    assert [m.content for m in memory.messages()] == ["q", "a"]


async def test_least_recently_used_chat_is_evicted():
    store = ConversationMemoryStore(max_chats=2)
    first = await store.get("a")
    await store.get("b")
    assert await store.get("a") is first
    await store.get("c")
    assert len(store) == 2
    assert await store.get("a") is first


async def test_busy_chat_is_not_evicted():
    store = ConversationMemoryStore(max_chats=1)
    busy = await store.get("busy")
    async with busy.lock:
        await store.get("other")
        assert len(store) == 2
        assert await store.get("busy") is busy


async def test_concurrent_creation_yields_single_memory():
    store = ConversationMemoryStore()
    memories = await asyncio.gather(*(store.get("shared") for _ in range(20)))
    assert all(m is memories[0] for m in memories)


async def test_same_chat_requests_are_serialized():
    store = ConversationMemoryStore()
    order: list[str] = []

    async def handle(name: str):
        memory = await store.get("chat")
        async with memory.lock:
            order.append(f"{name}-start")
            await asyncio.sleep(0.01)
            memory.record_turn(name, f"answer {name}")
            order.append(f"{name}-end")

    await asyncio.gather(handle("one"), handle("two"))
    assert order == ["one-start", "one-end", "two-start", "two-end"]
    assert len(await store.get("chat")) == 4

"""Question answering endpoints."""

from __future__ import annotations

import json

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from agentic_rag.api.dependencies import get_memory_store, get_orchestrator
from agentic_rag.memory.conversation import ConversationMemoryStore
from agentic_rag.models.domain import OrchestrationResult
from agentic_rag.models.schemas import AskRequest, AskResponse
from agentic_rag.observability.logger import get_logger
from agentic_rag.pipeline.orchestrator import Orchestrator

logger = get_logger("routes_ask")

router = APIRouter()


def to_response(result: OrchestrationResult) -> AskResponse:
    return AskResponse(
        answer=result.final_answer,
        confidence=max(0.0, min(1.0, result.confidence)),
        was_corrected=result.was_corrected,
        intent=result.intent,
        route=result.route.value if result.route else None,
        issues=result.issues,
        trace_id=result.trace_id,
    )


def split_tokens(text: str) -> list[str]:
    """Split an answer into whitespace-preserving chunks for streaming."""
    tokens: list[str] = []
    for i, word in enumerate(text.split(" ")):
        tokens.append(word if i == 0 else " " + word)
    return tokens


def sse(event: str, data) -> str:
    return f"event: {event}\ndata: {json.dumps(data, ensure_ascii=False)}\n\n"


@router.post("/ask", response_model=AskResponse)
async def ask(
    request: AskRequest,
    orchestrator: Orchestrator = Depends(get_orchestrator),
    memory_store: ConversationMemoryStore = Depends(get_memory_store),
) -> AskResponse:
    memory = await memory_store.get(request.chat_id)
    async with memory.lock:
        result = await orchestrator.orchestrate(request.question, history=memory.messages())
        memory.record_turn(request.question, result.final_answer)
    return to_response(result)


@router.post("/ask/stream")
async def ask_stream(
    request: AskRequest,
    orchestrator: Orchestrator = Depends(get_orchestrator),
    memory_store: ConversationMemoryStore = Depends(get_memory_store),
):
    """Stream the answer via Server-Sent Events.

    The turn is recorded only after the last event was sent, so a client that
    disconnects mid-stream leaves the conversation untouched.
    """
    memory = await memory_store.get(request.chat_id)

    async def event_generator():
        async with memory.lock:
            result = await orchestrator.orchestrate(request.question, history=memory.messages())
            for token in split_tokens(result.final_answer):
                yield sse("token", token)
            yield sse("metadata", to_response(result).model_dump(exclude={"answer"}))
            yield sse("done", "")
            memory.record_turn(request.question, result.final_answer)
            logger.info("stream_completed", chat_id=request.chat_id)

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )

"""HTTP streaming API for the AI Tool Advisor."""

import json
import logging
from typing import Iterator, List, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import TypeAdapter, ValidationError

from config.settings import Settings
from orchestrator import ToolAdvisorOrchestrator
from schemas.conversation import ConversationMessage, StreamEvent

logger = logging.getLogger(__name__)

_messages_adapter = TypeAdapter(List[ConversationMessage])


def sse_format(event: StreamEvent) -> str:
    """Frame one event as a Server-Sent Events data line."""
    return f"data: {json.dumps(event.to_payload(), ensure_ascii=False)}\n\n"


def create_app(orchestrator: Optional[ToolAdvisorOrchestrator] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        orchestrator: Orchestrator to serve; built from ``Settings()`` when
            omitted, so a missing catalog fails at startup.
    """
    if orchestrator is None:
        orchestrator = ToolAdvisorOrchestrator(settings=Settings())

    app = FastAPI(title="AI Tool Advisor")
    app.state.orchestrator = orchestrator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"], allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"]
    )

    @app.get("/api/categories")
    def get_categories():
        engine = app.state.orchestrator.engine
        return {
            "categories": [c.model_dump() for c in engine.get_categories()],
            "total": engine.get_total_tool_count(),
        }

    @app.post("/api/chat")
    async def chat(req: Request):
        try:
            body = await req.json()
        except json.JSONDecodeError:
            return JSONResponse({"error": "Invalid JSON body"}, status_code=400)

        raw_messages = body.get("messages") if isinstance(body, dict) else None
        if not raw_messages or not isinstance(raw_messages, list):
            return JSONResponse({"error": "Messages are required"}, status_code=400)

        try:
            messages = _messages_adapter.validate_python(
                [{"role": m.get("role"), "content": m.get("content")} for m in raw_messages]
            )
        except (ValidationError, AttributeError) as e:
            logger.warning(f"Rejected chat request: {e}")
            return JSONResponse({"error": "Invalid messages"}, status_code=400)

        def event_stream() -> Iterator[str]:
            for event in app.state.orchestrator.stream_chat(messages):
                yield sse_format(event)

        return StreamingResponse(
            event_stream(),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
            },
        )

    return app

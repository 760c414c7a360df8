"""Tests for the streaming HTTP API."""

import json
from fastapi.testclient import TestClient

from api import create_app
from config.settings import Settings
from llm.base_client import LLMResponse, ToolCall
from orchestrator import ToolAdvisorOrchestrator
from retrieval.tool_search import ToolSearchEngine
from schemas.catalog import CatalogEntry

from test_loop import ScriptedLLMClient


def parse_sse(body: str) -> list:
    """Decode `data: ...` frames."""
    events = []
    for frame in body.split("\n\n"):
        if frame.startswith("data: "):
            events.append(json.loads(frame[len("data: "):]))
    return events


class TestChatAPI:
    """Test the /api/chat transport."""

    def setup_method(self):
        """Set up test fixtures."""
        self.engine = ToolSearchEngine([
            CatalogEntry(id=7, name="Runway", category="Video Generation",
                         description="video editing", url="https://runwayml.com",
                         pricing={"free": True}),
        ])
        self.client_llm = ScriptedLLMClient([
            LLMResponse(content="", tool_calls=[
                ToolCall(id="1", name="get_tool_details", arguments={"tool_name": "runway"})
            ]),
            LLMResponse(content="Runway is great for video."),
        ])
        orchestrator = ToolAdvisorOrchestrator(
            settings=Settings(openai_api_key="k"),
            llm_client=self.client_llm,
            engine=self.engine
        )
        self.client = TestClient(create_app(orchestrator))

    def test_stream(self):
        """The response is an SSE stream ending in done."""
        response = self.client.post(
            "/api/chat",
            json={"messages": [{"role": "user", "content": "video tools"}]}
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.headers["cache-control"] == "no-cache"

        events = parse_sse(response.text)
        assert [e["type"] for e in events] == ["status", "status", "result", "done"]
        result = events[2]
        assert result["content"] == "Runway is great for video."
        assert result["toolCards"][0]["name"] == "Runway"
        assert result["toolCards"][0]["url"] == "https://runwayml.com"

    def test_extra_message_fields_ignored(self):
        """Only role and content are taken from each message."""
        response = self.client.post(
            "/api/chat",
            json={"messages": [{"role": "user", "content": "video", "toolCards": []}]}
        )
        assert response.status_code == 200

    def test_missing_messages(self):
        """Empty or missing messages are rejected."""
        for body in ({}, {"messages": []}, {"messages": "hi"}):
            response = self.client.post("/api/chat", json=body)
            assert response.status_code == 400
            assert response.json() == {"error": "Messages are required"}

    def test_invalid_role(self):
        """Unknown roles are rejected."""
        response = self.client.post(
            "/api/chat",
            json={"messages": [{"role": "system", "content": "x"}]}
        )
        assert response.status_code == 400

    def test_categories(self):
        """Category summary endpoint."""
        response = self.client.get("/api/categories")
        assert response.status_code == 200
        assert response.json() == {
            "categories": [{"name": "Video Generation", "count": 1}],
            "total": 1,
        }

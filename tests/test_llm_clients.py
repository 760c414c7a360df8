"""Tests for the provider LLM clients."""

import json
import pytest
from unittest.mock import Mock, patch

from llm.base_client import Message, ToolCall
from llm.factory import create_llm_client, LLMProvider
from llm.openai_client import OpenAIClient
from llm.anthropic_client import AnthropicClient
from react.tools import GetCategoriesTool


SEARCH_DEFINITION = {
    "type": "function",
    "function": {
        "name": "search_tools",
        "description": "Search",
        "parameters": {"type": "object", "properties": {"query": {"type": "string"}}},
    },
}

ROUND_MESSAGES = [
    Message(role="system", content="You are helpful."),
    Message(role="user", content="image tools"),
    Message(role="assistant", content="", tool_calls=[
        ToolCall(id="c1", name="search_tools", arguments={"query": "image"}),
        ToolCall(id="c2", name="get_categories", arguments={}),
    ]),
    Message(role="tool", content='{"result": []}', tool_call_id="c1", name="search_tools"),
    Message(role="tool", content='{"result": []}', tool_call_id="c2", name="get_categories"),
]


def named_mock(name, **attrs):
    """Mock whose ``name`` attribute is data, not the mock's repr name."""
    mock = Mock(**attrs)
    mock.name = name
    return mock


class TestOpenAIClient:
    """Test OpenAI request/response translation."""

    @patch("llm.openai_client.OpenAI")
    def test_chat_with_tool_calls(self, mock_openai):
        """Tool calls are decoded from the completion."""
        function = named_mock("search_tools", arguments='{"query": "video"}')
        completion = Mock()
        completion.choices = [Mock(
            message=Mock(content=None, tool_calls=[Mock(id="call_9", function=function)]),
            finish_reason="tool_calls",
        )]
        completion.usage = Mock(prompt_tokens=10, completion_tokens=5, total_tokens=15)
        mock_openai.return_value.chat.completions.create.return_value = completion

        client = OpenAIClient(api_key="sk-test", model="gpt-test")
        response = client.chat(ROUND_MESSAGES, tools=[SEARCH_DEFINITION])

        assert response.content == ""
        assert response.tool_calls[0].id == "call_9"
        assert response.tool_calls[0].name == "search_tools"
        assert response.tool_calls[0].arguments == {"query": "video"}
        assert response.usage["total_tokens"] == 15

        kwargs = mock_openai.return_value.chat.completions.create.call_args[1]
        assert kwargs["model"] == "gpt-test"
        assert kwargs["tool_choice"] == "auto"
        sent = kwargs["messages"]
        assert sent[2]["tool_calls"][0]["function"]["arguments"] == json.dumps({"query": "image"})
        assert sent[3] == {"role": "tool", "content": '{"result": []}', "tool_call_id": "c1"}

    @patch("llm.openai_client.OpenAI")
    def test_malformed_arguments(self, mock_openai):
        """Undecodable arguments become an empty mapping."""
        function = named_mock("search_tools", arguments="{oops")
        completion = Mock()
        completion.choices = [Mock(
            message=Mock(content="", tool_calls=[Mock(id="x", function=function)]),
            finish_reason="tool_calls",
        )]
        completion.usage = None
        mock_openai.return_value.chat.completions.create.return_value = completion

        response = OpenAIClient(api_key="sk-test").chat([Message(role="user", content="hi")])
        assert response.tool_calls[0].arguments == {}

    @patch("llm.openai_client.OpenAI")
    def test_api_error_propagates(self, mock_openai):
        """Provider errors are re-raised."""
        mock_openai.return_value.chat.completions.create.side_effect = ConnectionError("down")
        client = OpenAIClient(api_key="sk-test")
        with pytest.raises(ConnectionError):
            client.chat([Message(role="user", content="hi")])

    def test_requires_api_key(self, monkeypatch):
        """Chatting without a key fails loudly."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        client = OpenAIClient()
        with pytest.raises(RuntimeError):
            client.chat([Message(role="user", content="hi")])


class TestAnthropicClient:
    """Test Anthropic request/response translation."""

    def test_convert_messages(self):
        """System prompt is split out and one round's results share a user turn."""
        system, converted = AnthropicClient._convert_messages(ROUND_MESSAGES)

        assert system == "You are helpful."
        assert converted[0] == {"role": "user", "content": "image tools"}
        assert [b["type"] for b in converted[1]["content"]] == ["tool_use", "tool_use"]
        assert converted[2]["role"] == "user"
        assert [b["tool_use_id"] for b in converted[2]["content"]] == ["c1", "c2"]
        assert len(converted) == 3

    def test_convert_tools(self):
        """Function definitions become input schemas, empty ones included."""
        tools = AnthropicClient._convert_tools([
            SEARCH_DEFINITION,
            GetCategoriesTool(engine=None).get_definition(),
        ])
        assert tools[0]["name"] == "search_tools"
        assert tools[0]["input_schema"]["properties"]["query"]["type"] == "string"
        assert tools[1]["input_schema"] == {"type": "object", "properties": {}}

    @patch("anthropic.Anthropic")
    def test_chat_parses_blocks(self, mock_anthropic):
        """Text and tool_use blocks are split into content and tool calls."""
        response = Mock()
        response.content = [
            Mock(type="text", text="Let me search."),
            named_mock("search_tools", type="tool_use", id="tu_1", input={"query": "music"}),
        ]
        response.usage = Mock(input_tokens=12, output_tokens=3)
        response.stop_reason = "tool_use"
        mock_anthropic.return_value.messages.create.return_value = response

        client = AnthropicClient(api_key="ak")
        result = client.chat(ROUND_MESSAGES, tools=[SEARCH_DEFINITION])

        assert result.content == "Let me search."
        assert result.tool_calls[0].name == "search_tools"
        assert result.tool_calls[0].arguments == {"query": "music"}
        assert result.usage["total_tokens"] == 15

        kwargs = mock_anthropic.return_value.messages.create.call_args[1]
        assert kwargs["system"] == "You are helpful."
        assert kwargs["tools"][0]["name"] == "search_tools"


class TestFactory:
    """Test LLM client factory."""

    @patch("llm.openai_client.OpenAI")
    def test_accepts_string_provider(self, mock_openai):
        """Provider strings are accepted."""
        client = create_llm_client("openai", api_key="sk-test")
        assert isinstance(client, OpenAIClient)

    @patch("anthropic.Anthropic")
    def test_accepts_enum_provider(self, mock_anthropic):
        """Provider enums are accepted."""
        client = create_llm_client(LLMProvider.ANTHROPIC, api_key="ak", model="m")
        assert isinstance(client, AnthropicClient)
        assert client.get_model_name() == "m"

    def test_unsupported_provider(self):
        """Unknown providers raise ValueError."""
        with pytest.raises(ValueError, match="Unsupported LLM provider"):
            create_llm_client("gemini")

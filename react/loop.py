"""Bounded tool-calling loop between the agent and the retrieval tools."""

import json
import logging
from typing import Callable, Dict, List, Optional

from llm.base_client import BaseLLMClient, LLMResponse, Message, ToolCall
from retrieval.tool_search import ToolSearchEngine
from schemas.catalog import CatalogEntry
from schemas.conversation import ChatResult, ConversationMessage
from .tools import Tool, ToolResult

logger = logging.getLogger(__name__)

StatusCallback = Callable[[str], None]


SYSTEM_PROMPT_TEMPLATE = """You are AI Tool Advisor, a friendly and knowledgeable assistant that helps people find the perfect AI tools for their needs.

You have access to a curated database of {tool_count}+ AI tools across categories including {categories}.

RULES:
1. ALWAYS use the provided search functions to find tools before answering. Never guess or fabricate tool information.
2. Recommend 2-5 tools per query, ranked by relevance.
3. For each recommendation, clearly state: tool name, what it does, pricing info, and why it fits the user's needs.
4. If the user's needs are unclear, ask 1-2 brief clarifying questions.
5. Be conversational, concise, and helpful.
6. When comparing tools, highlight the key differences, pros, and cons.
7. Respond in the SAME LANGUAGE as the user's message.
8. Format responses with markdown for readability (use **bold**, bullet lists, etc.).
9. Always include the tool's URL when recommending it so users can visit directly.
10. If no tools match the query, honestly say so and suggest alternatives or related categories."""


def build_system_prompt(engine: ToolSearchEngine) -> str:
    """Describe the catalog's size and categories to the agent."""
    categories = ", ".join(c.name for c in engine.get_categories()) or "various areas"
    return SYSTEM_PROMPT_TEMPLATE.format(
        tool_count=engine.get_total_tool_count(),
        categories=categories
    )


class ToolCallingLoop:
    """
    Drives the exchange between the agent and the retrieval tools.

    Each round executes every call the agent requested, folds the results
    back into the conversation, and asks the agent again. After
    ``max_iterations`` rounds the next response is final even if it still
    requests calls.
    """

    MAX_ITERATIONS = 5
    STATUS_SEARCHING = "Searching for the best tools..."
    UNKNOWN_FUNCTION = "Unknown function"

    def __init__(
        self,
        llm_client: BaseLLMClient,
        tools: List[Tool],
        system_prompt: str = "",
        max_iterations: int = MAX_ITERATIONS
    ):
        """
        Initialize the loop.

        Args:
            llm_client: LLM client acting as the agent
            tools: Available retrieval tools
            system_prompt: Instructions sent ahead of the conversation
            max_iterations: Maximum rounds of tool execution (default: 5)
        """
        self.llm_client = llm_client
        self.tools = {tool.name: tool for tool in tools}
        self.tool_definitions = [tool.get_definition() for tool in tools]
        self.system_prompt = system_prompt
        self.max_iterations = max_iterations

    def run(
        self,
        messages: List[ConversationMessage],
        on_status: Optional[StatusCallback] = None
    ) -> ChatResult:
        """
        Run one turn until the agent answers or the round cap is hit.

        Args:
            messages: Conversation so far; the last message is the new user input
            on_status: Optional callback receiving progress strings

        Returns:
            ChatResult with the agent's answer and the surfaced entries

        Raises:
            ValueError: If ``messages`` is empty
        """
        if not messages:
            raise ValueError("At least one message is required")

        llm_messages = self._build_initial_messages(messages)
        surfaced: Dict[int, CatalogEntry] = {}
        usage: Dict[str, int] = {}

        response = self._ask(llm_messages, usage)
        rounds = 0

        while response.tool_calls and rounds < self.max_iterations:
            rounds += 1
            logger.info(
                f"Tool round {rounds}/{self.max_iterations}: "
                f"{[tc.name for tc in response.tool_calls]}"
            )
            self._notify(on_status, self.STATUS_SEARCHING)

            llm_messages.append(Message(
                role="assistant",
                content=response.content or "",
                tool_calls=response.tool_calls
            ))

            for tool_call in response.tool_calls:
                result = self._execute(tool_call)
                for entry in result.entries:
                    # First copy of an id wins
                    surfaced.setdefault(entry.id, entry)

                llm_messages.append(Message(
                    role="tool",
                    content=self._format_observation(result),
                    tool_call_id=tool_call.id,
                    name=tool_call.name
                ))

            response = self._ask(llm_messages, usage)

        if response.tool_calls:
            logger.warning(
                f"Tool round cap ({self.max_iterations}) reached; "
                "treating the latest response as final"
            )
        else:
            logger.info(f"Agent answered after {rounds} tool round(s)")
        if usage:
            logger.info(
                f"Token usage: {usage.get('prompt_tokens', 0)} prompt, "
                f"{usage.get('completion_tokens', 0)} completion, "
                f"{usage.get('total_tokens', 0)} total"
            )

        return ChatResult(text=response.content or "", tool_cards=list(surfaced.values()))

    def _ask(self, llm_messages: List[Message], usage: Dict[str, int]) -> LLMResponse:
        """Query the agent, adding its token counts to ``usage``."""
        response = self.llm_client.chat(
            messages=llm_messages,
            tools=self.tool_definitions,
            temperature=0.3,
            max_tokens=4000
        )
        logger.debug(f"Agent response finished with {response.finish_reason!r}")
        for key, count in (response.usage or {}).items():
            usage[key] = usage.get(key, 0) + count
        return response

    def _build_initial_messages(self, messages: List[ConversationMessage]) -> List[Message]:
        """System prompt, prior history, then the newest message as the stimulus."""
        llm_messages = []
        if self.system_prompt:
            llm_messages.append(Message(role="system", content=self.system_prompt))

        for msg in messages[:-1]:
            role = "assistant" if msg.role == "assistant" else "user"
            llm_messages.append(Message(role=role, content=msg.content))

        llm_messages.append(Message(role="user", content=messages[-1].content))
        return llm_messages

    def _execute(self, tool_call: ToolCall) -> ToolResult:
        tool = self.tools.get(tool_call.name)
        if tool is None:
            logger.warning(f"Agent requested unknown tool '{tool_call.name}'")
            return ToolResult(
                tool_name=tool_call.name,
                success=False,
                result=None,
                error=self.UNKNOWN_FUNCTION
            )
        return tool.run(tool_call.arguments or {})

    @staticmethod
    def _notify(on_status: Optional[StatusCallback], status: str) -> None:
        if on_status is None:
            return
        try:
            on_status(status)
        except Exception as e:
            logger.warning(f"Status callback failed: {e}")

    @staticmethod
    def _format_observation(result: ToolResult) -> str:
        """Format tool result for LLM consumption."""
        return json.dumps({"result": result.to_payload()}, ensure_ascii=False)

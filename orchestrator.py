"""Main orchestrator for the AI Tool Advisor."""

import logging
import queue
import threading
from typing import Iterator, List, Optional

from config.settings import Settings
from schemas.conversation import ChatResult, ConversationMessage, StreamEvent

from retrieval.catalog_loader import load_catalog
from retrieval.tool_search import ToolSearchEngine

from llm.factory import create_llm_client, LLMProvider
from llm.base_client import BaseLLMClient

from react.tools import build_retrieval_tools
from react.loop import ToolCallingLoop, StatusCallback, build_system_prompt

logger = logging.getLogger(__name__)


class ToolAdvisorOrchestrator:
    """Wires the catalog, the LLM client and the tool-calling loop together."""

    STATUS_THINKING = "Thinking..."
    ERROR_MESSAGE = "Something went wrong. Please try again."

    def __init__(
        self,
        settings: Optional[Settings] = None,
        llm_client: Optional[BaseLLMClient] = None,
        engine: Optional[ToolSearchEngine] = None
    ):
        """
        Initialize orchestrator.

        Args:
            settings: Application settings
            llm_client: Pre-built LLM client (created from settings when omitted)
            engine: Pre-built search engine (catalog loaded from settings when omitted)

        Raises:
            CatalogUnavailableError: If the catalog cannot be loaded
        """
        self.settings = settings or Settings()

        if engine is None:
            logger.info(f"Using catalog: {self.settings.catalog_path}")
            engine = ToolSearchEngine(load_catalog(self.settings.catalog_path))
        self.engine = engine

        self.llm_client = llm_client
        if self.llm_client is None:
            self._init_llm_client()

        self.loop: Optional[ToolCallingLoop] = None
        if self.llm_client:
            self._init_loop()

    def _init_llm_client(self):
        """Initialize LLM client based on settings."""
        api_key = self.settings.get_llm_api_key()

        if not api_key:
            logger.warning(
                f"No API key for {self.settings.llm_provider}. "
                "Chat is disabled; direct catalog search still works."
            )
            return

        self.llm_client = create_llm_client(
            provider=LLMProvider(self.settings.llm_provider),
            api_key=api_key,
            model=self.settings.llm_model
        )
        logger.info(
            f"LLM client initialized: {self.llm_client.get_provider_name()} "
            f"({self.llm_client.get_model_name()})"
        )

    def _init_loop(self):
        """Initialize the tool-calling loop with the retrieval tools."""
        tools = build_retrieval_tools(self.engine)
        self.loop = ToolCallingLoop(
            llm_client=self.llm_client,
            tools=tools,
            system_prompt=build_system_prompt(self.engine),
            max_iterations=self.settings.max_tool_rounds
        )
        logger.info(f"Tool-calling loop initialized with {len(tools)} tools")

    def chat(
        self,
        messages: List[ConversationMessage],
        on_status: Optional[StatusCallback] = None
    ) -> ChatResult:
        """
        Answer the newest message of a conversation.

        Args:
            messages: Conversation history, newest user message last
            on_status: Optional progress callback

        Returns:
            ChatResult with answer text and deduplicated tool cards

        Raises:
            RuntimeError: If no LLM client is configured
        """
        if self.loop is None:
            raise RuntimeError("LLM client not initialized. Check API key.")
        return self.loop.run(messages, on_status=on_status)

    def stream_chat(self, messages: List[ConversationMessage]) -> Iterator[StreamEvent]:
        """
        Run one turn and yield transport events as they happen.

        Yields ``status`` events, then exactly one ``result`` or ``error``
        event, then ``done``.
        """
        events: "queue.Queue[Optional[StreamEvent]]" = queue.Queue()

        def worker():
            try:
                result = self.chat(
                    messages,
                    on_status=lambda text: events.put(StreamEvent.status(text))
                )
                events.put(StreamEvent.result(result))
            except Exception:
                logger.exception("Chat error")
                events.put(StreamEvent.error(self.ERROR_MESSAGE))
            finally:
                events.put(None)

        yield StreamEvent.status(self.STATUS_THINKING)

        thread = threading.Thread(target=worker, name="tool-advisor-turn", daemon=True)
        thread.start()

        while True:
            event = events.get()
            if event is None:
                break
            yield event

        thread.join()
        yield StreamEvent.done()

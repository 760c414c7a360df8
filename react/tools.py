"""Retrieval tools exposed to the agent."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field

from retrieval.tool_search import ToolSearchEngine
from schemas.catalog import CatalogEntry

logger = logging.getLogger(__name__)


def category_hint(engine: ToolSearchEngine) -> str:
    """Describe the category filter using the categories actually loaded."""
    names = ", ".join(f'"{c.name}"' for c in engine.get_categories())
    if not names:
        return "Optional category filter"
    return f"Optional category filter. Options: {names}"


class ToolResult(BaseModel):
    """Result from tool execution."""
    tool_name: str
    success: bool
    result: Any
    error: Optional[str] = None
    entries: List[CatalogEntry] = Field(default_factory=list)  # Catalog entries surfaced

    def to_payload(self) -> Any:
        """Value sent back to the agent."""
        if not self.success:
            return {"error": self.error}
        return self.result


class Tool(ABC):
    """Abstract base class for tools."""
    name: str
    description: str
    parameters: Dict[str, Any]

    @abstractmethod
    def execute(self, **kwargs) -> ToolResult:
        """Execute the tool with given arguments."""
        pass

    def run(self, arguments: Dict[str, Any]) -> ToolResult:
        """Execute with agent-supplied arguments, turning bad arguments into an error result."""
        # Keys the declaration doesn't name are dropped
        known = self.parameters.get("properties", {})
        accepted = {key: value for key, value in arguments.items() if key in known}
        if len(accepted) != len(arguments):
            logger.debug(f"Ignoring extra arguments for {self.name}: {sorted(set(arguments) - set(known))}")
        try:
            return self.execute(**accepted)
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Bad arguments for {self.name}: {arguments!r} ({e})")
            return ToolResult(
                tool_name=self.name,
                success=False,
                result=None,
                error=f"Invalid arguments for {self.name}: {e}"
            )

    def get_definition(self) -> Dict:
        """Get OpenAI-compatible tool definition."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters
            }
        }


class SearchToolsTool(Tool):
    """Keyword search over the catalog."""

    name = "search_tools"
    description = (
        "Search for AI tools by keyword, category, or use case. Use this whenever "
        "the user asks for tool recommendations or searches for specific capabilities."
    )

    parameters = {
        "type": "object",
        "properties": {
            "query": {
                "type": "string",
                "description": (
                    "Search keywords describing the desired tool functionality or use case "
                    '(e.g., "video generation", "code assistant", "free image editor")'
                )
            },
            "category": {
                "type": "string",
                "description": "Optional category filter"
            },
            "free_only": {
                "type": "boolean",
                "description": "If true, only return tools that have a free tier"
            },
            "limit": {
                "type": "number",
                "description": "Maximum number of results to return (default: 5, max: 10)"
            }
        },
        "required": ["query"]
    }

    def __init__(self, engine: ToolSearchEngine):
        self.engine = engine
        properties = dict(self.parameters["properties"])
        properties["category"] = {"type": "string", "description": category_hint(engine)}
        self.parameters = {**self.parameters, "properties": properties}

    def execute(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        free_only: Optional[bool] = False,
        limit: Optional[float] = None
    ) -> ToolResult:
        """Search for tools."""
        results = self.engine.search(
            query=query,
            category=category,
            free_only=bool(free_only),
            limit=int(limit) if limit else ToolSearchEngine.DEFAULT_LIMIT
        )
        return ToolResult(
            tool_name=self.name,
            success=True,
            result=[entry.to_payload() for entry in results],
            entries=results
        )


class GetToolDetailsTool(Tool):
    """Look up one tool by name."""

    name = "get_tool_details"
    description = (
        "Get detailed information about a specific AI tool by name. "
        "Use when the user asks about a particular tool."
    )

    parameters = {
        "type": "object",
        "properties": {
            "tool_name": {
                "type": "string",
                "description": "The name of the AI tool to look up"
            }
        },
        "required": ["tool_name"]
    }

    def __init__(self, engine: ToolSearchEngine):
        self.engine = engine

    def execute(self, tool_name: str) -> ToolResult:
        """Get tool details."""
        entry = self.engine.get_tool_details(str(tool_name))

        # A miss is ordinary data the agent can relay to the user
        if entry is None:
            return ToolResult(
                tool_name=self.name,
                success=True,
                result={"error": f'Tool "{tool_name}" not found'}
            )

        return ToolResult(
            tool_name=self.name,
            success=True,
            result=entry.to_payload(),
            entries=[entry]
        )


class CompareToolsTool(Tool):
    """Side-by-side lookup of several tools."""

    name = "compare_tools"
    description = (
        "Compare two or more AI tools side by side. "
        "Use when the user wants to compare specific tools."
    )

    parameters = {
        "type": "object",
        "properties": {
            "tool_names": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Array of tool names to compare (2-5 tools)"
            }
        },
        "required": ["tool_names"]
    }

    def __init__(self, engine: ToolSearchEngine):
        self.engine = engine

    def execute(self, tool_names: List[str]) -> ToolResult:
        """Compare tools."""
        if isinstance(tool_names, str):
            raise TypeError("tool_names must be an array of strings")

        results = self.engine.compare_tools(str(name) for name in tool_names)
        return ToolResult(
            tool_name=self.name,
            success=True,
            result=[entry.to_payload() for entry in results],
            entries=results
        )


class GetCategoriesTool(Tool):
    """Category summary of the catalog."""

    name = "get_categories"
    description = (
        "Get all available tool categories and the number of tools in each. "
        "Use when the user asks what types of tools are available or wants to browse categories."
    )

    parameters = {
        "type": "object",
        "properties": {}
    }

    def __init__(self, engine: ToolSearchEngine):
        self.engine = engine

    def execute(self, **kwargs) -> ToolResult:
        """List categories."""
        categories = self.engine.get_categories()
        return ToolResult(
            tool_name=self.name,
            success=True,
            result=[c.model_dump() for c in categories]
        )


def build_retrieval_tools(engine: ToolSearchEngine) -> List[Tool]:
    """Create the four retrieval tools bound to one engine."""
    return [
        SearchToolsTool(engine),
        GetToolDetailsTool(engine),
        CompareToolsTool(engine),
        GetCategoriesTool(engine),
    ]

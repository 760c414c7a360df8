"""Tool-calling loop and retrieval tools."""

from .tools import (
    Tool,
    ToolResult,
    SearchToolsTool,
    GetToolDetailsTool,
    CompareToolsTool,
    GetCategoriesTool,
    build_retrieval_tools,
)
from .loop import ToolCallingLoop, build_system_prompt

__all__ = [
    "Tool",
    "ToolResult",
    "SearchToolsTool",
    "GetToolDetailsTool",
    "CompareToolsTool",
    "GetCategoriesTool",
    "build_retrieval_tools",
    "ToolCallingLoop",
    "build_system_prompt",
]

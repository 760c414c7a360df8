"""Pydantic schemas for the AI Tool Advisor."""

from .catalog import CatalogEntry, Pricing, CategoryCount
from .conversation import ConversationMessage, ChatResult, StreamEvent, StreamEventType

__all__ = [
    "CatalogEntry",
    "Pricing",
    "CategoryCount",
    "ConversationMessage",
    "ChatResult",
    "StreamEvent",
    "StreamEventType",
]

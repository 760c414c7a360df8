"""Conversation, turn result and stream event schemas."""

from enum import Enum
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

from .catalog import CatalogEntry


class ConversationMessage(BaseModel):
    """One message of the dialogue history."""
    role: Literal["user", "assistant"]
    content: str


class ChatResult(BaseModel):
    """Final answer of one orchestration turn."""
    text: str
    tool_cards: list[CatalogEntry] = Field(default_factory=list)


class StreamEventType(str, Enum):
    """Kinds of events emitted on the response stream."""
    STATUS = "status"
    RESULT = "result"
    ERROR = "error"
    DONE = "done"


class StreamEvent(BaseModel):
    """A single typed event on the response stream."""
    model_config = ConfigDict(populate_by_name=True)

    type: StreamEventType
    text: Optional[str] = None
    content: Optional[str] = None
    tool_cards: Optional[list[CatalogEntry]] = Field(None, alias="toolCards")

    @classmethod
    def status(cls, text: str) -> "StreamEvent":
        return cls(type=StreamEventType.STATUS, text=text)

    @classmethod
    def result(cls, chat_result: ChatResult) -> "StreamEvent":
        return cls(
            type=StreamEventType.RESULT,
            content=chat_result.text,
            tool_cards=chat_result.tool_cards
        )

    @classmethod
    def error(cls, text: str) -> "StreamEvent":
        return cls(type=StreamEventType.ERROR, text=text)

    @classmethod
    def done(cls) -> "StreamEvent":
        return cls(type=StreamEventType.DONE)

    def to_payload(self) -> dict:
        """Serialize for the wire, omitting unset fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

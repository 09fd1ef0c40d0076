"""Pydantic models for the unified session schema.

Field names match the JSON wire format. Zero values (``""``, ``0``, ``False``,
``None``, empty lists and mappings) are left out when serializing, except for
the fields each model lists in ``always_present``.
"""
from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, ClassVar, Literal, Optional, Union

from pydantic import (
    BaseModel,
    Discriminator,
    Field,
    SerializerFunctionWrapHandler,
    Tag,
    model_serializer,
)

AgentType = Literal["claude", "goose"]
AGENT_TYPES: tuple[str, ...] = ("claude", "goose")


def _is_zero(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, bool):
        return not value
    if isinstance(value, (int, float)):
        return value == 0
    if isinstance(value, (str, list, tuple, dict)):
        return len(value) == 0
    return False


class WireModel(BaseModel):
    always_present: ClassVar[frozenset[str]] = frozenset()

    @model_serializer(mode="wrap")
    def omit_zero_values(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        return {
            key: value
            for key, value in data.items()
            if key in self.always_present or not _is_zero(value)
        }


# ── Content blocks ──────────────────────────────────────────────────

class TextBlock(WireModel):
    always_present: ClassVar[frozenset[str]] = frozenset({"type"})

    type: Literal["text"] = "text"
    text: str = ""


class ToolUseBlock(WireModel):
    always_present: ClassVar[frozenset[str]] = frozenset({"type"})

    type: Literal["tool_use"] = "tool_use"
    tool_name: str = ""
    tool_use_id: str = ""
    tool_input: dict[str, Any] = Field(default_factory=dict)


class ToolResultBlock(WireModel):
    always_present: ClassVar[frozenset[str]] = frozenset({"type"})

    type: Literal["tool_result"] = "tool_result"
    tool_use_id: str = ""
    tool_content: str = ""


class CustomBlock(WireModel):
    """A block whose tag is not one of the known kinds but which carries text."""

    always_present: ClassVar[frozenset[str]] = frozenset({"type"})

    type: str = ""
    text: str = ""


KNOWN_BLOCK_TYPES = frozenset({"text", "tool_use", "tool_result"})


def _block_tag(value: Any) -> str:
    if isinstance(value, dict):
        tag = value.get("type")
    else:
        tag = getattr(value, "type", None)
    if isinstance(tag, str) and tag in KNOWN_BLOCK_TYPES:
        return tag
    return "custom"


ContentBlock = Annotated[
    Union[
        Annotated[TextBlock, Tag("text")],
        Annotated[ToolUseBlock, Tag("tool_use")],
        Annotated[ToolResultBlock, Tag("tool_result")],
        Annotated[CustomBlock, Tag("custom")],
    ],
    Discriminator(_block_tag),
]


# ── Messages ────────────────────────────────────────────────────────

class TokenUsage(WireModel):
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0

    @classmethod
    def from_counts(cls, input_tokens: int, output_tokens: int) -> TokenUsage:
        return cls(
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=input_tokens + output_tokens,
        )

    @classmethod
    def from_total(cls, total_tokens: int) -> TokenUsage:
        return cls(total_tokens=total_tokens)


class MessageMetadata(WireModel):
    is_sidechain: bool = False
    agent_id: str = ""
    tokens: Optional[TokenUsage] = None
    model: str = ""
    request_id: str = ""
    extra: dict[str, str] = Field(default_factory=dict)


class Message(WireModel):
    always_present: ClassVar[frozenset[str]] = frozenset({"role", "content"})

    uuid: str = ""
    parent_uuid: str = ""
    timestamp: Optional[datetime] = None
    role: str
    content: list[ContentBlock] = Field(default_factory=list)
    metadata: MessageMetadata = Field(default_factory=MessageMetadata)


# ── Sessions ────────────────────────────────────────────────────────

class SessionMetadata(WireModel):
    working_dir: str = ""
    git_branch: str = ""
    model: str = ""
    provider: str = ""
    name: str = ""
    extra: dict[str, str] = Field(default_factory=dict)


class Subagent(WireModel):
    always_present: ClassVar[frozenset[str]] = frozenset({"messages"})

    agent_id: str = ""
    slug: str = ""
    messages: list[Message] = Field(default_factory=list)


class Session(WireModel):
    always_present: ClassVar[frozenset[str]] = frozenset(
        {"agent_type", "session_id", "created_at", "updated_at", "messages"}
    )

    agent_type: AgentType
    session_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    metadata: SessionMetadata = Field(default_factory=SessionMetadata)
    messages: list[Message] = Field(default_factory=list)
    subagents: list[Subagent] = Field(default_factory=list)


class Envelope(WireModel):
    always_present: ClassVar[frozenset[str]] = frozenset({"version", "generated_at", "sessions"})

    version: str
    generated_at: datetime
    sessions: list[Session] = Field(default_factory=list)

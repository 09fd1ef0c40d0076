"""Normalize raw content units into canonical content blocks.

Both sources carry message content as loosely typed JSON: a bare string, a
list of typed blocks, or (Goose only) a single block object. The helpers here
never raise; absent or mistyped fields become zero values and unrecognized
shapes are dropped.
"""
from __future__ import annotations

from typing import Any

from braindump.models import (
    ContentBlock,
    CustomBlock,
    TextBlock,
    ToolResultBlock,
    ToolUseBlock,
)
from braindump.parsers.fields import get_mapping, get_str

# Guards the recursive walk of nested tool results.
_MAX_NESTING = 32


def block_text(block: ContentBlock | None) -> str:
    """Collapse a block to its human-readable text."""
    if isinstance(block, (TextBlock, CustomBlock)):
        return block.text
    if isinstance(block, ToolResultBlock):
        return block.tool_content
    return ""


def tool_result_text(content: Any, *, allow_nested: bool = False, _depth: int = 0) -> str:
    """Flatten a tool_result payload to text.

    Strings are used verbatim. Lists are joined with newlines, each item
    contributing itself (strings) or its ``text`` field (objects); anything else
    contributes an empty line. With ``allow_nested`` a single object is
    normalized as a block and collapsed to its text.
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        chunks: list[str] = []
        for item in content:
            if isinstance(item, str):
                chunks.append(item)
            elif isinstance(item, dict):
                chunks.append(get_str(item, "text"))
            else:
                chunks.append("")
        return "\n".join(chunks)
    if allow_nested and isinstance(content, dict) and _depth < _MAX_NESTING:
        nested = normalize_block(content, allow_nested=True, _depth=_depth + 1)
        return block_text(nested)
    return ""


def normalize_block(raw: Any, *, allow_nested: bool = False, _depth: int = 0) -> ContentBlock | None:
    """Convert one raw content unit into zero or one canonical block."""
    if not isinstance(raw, dict):
        return None

    block_type = get_str(raw, "type")

    if block_type == "text":
        return TextBlock(text=get_str(raw, "text"))

    if block_type == "tool_use":
        return ToolUseBlock(
            tool_name=get_str(raw, "name"),
            tool_use_id=get_str(raw, "id"),
            tool_input=get_mapping(raw, "input") or {},
        )

    if block_type == "tool_result":
        return ToolResultBlock(
            tool_use_id=get_str(raw, "tool_use_id"),
            tool_content=tool_result_text(raw.get("content"), allow_nested=allow_nested, _depth=_depth),
        )

    # Unknown kinds survive only when they still carry readable text.
    text = raw.get("text")
    if isinstance(text, str):
        return CustomBlock(type=block_type, text=text)
    return None


def normalize_content(
    payload: Any,
    *,
    allow_bare_strings: bool = False,
    allow_single_block: bool = False,
    allow_nested: bool = False,
) -> list[ContentBlock]:
    """Normalize a message-level content payload into an ordered block list."""
    if isinstance(payload, str):
        return [TextBlock(text=payload)]

    blocks: list[ContentBlock] = []
    if isinstance(payload, list):
        for item in payload:
            if isinstance(item, str):
                if allow_bare_strings:
                    blocks.append(TextBlock(text=item))
                continue
            block = normalize_block(item, allow_nested=allow_nested)
            if block is not None:
                blocks.append(block)
        return blocks

    if allow_single_block and isinstance(payload, dict):
        block = normalize_block(payload, allow_nested=allow_nested)
        if block is not None:
            blocks.append(block)
    return blocks

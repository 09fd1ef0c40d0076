"""Convert Goose session store rows into unified Session models."""
from __future__ import annotations

import json
from typing import Any, Mapping

from braindump.date_utils import parse_timestamp
from braindump.models import (
    ContentBlock,
    Message,
    MessageMetadata,
    Session,
    SessionMetadata,
    TokenUsage,
)
from braindump.parsers.content import normalize_content
from braindump.parsers.fields import get_str, string_entries

AGENT_TYPE = "goose"

# Session columns without a first-class slot, surfaced under ``extra``.
_EXTRA_SESSION_COLUMNS = ("user_set_name", "session_type", "description")


class RowConversionError(ValueError):
    """A store row holds a value that cannot be converted to its column type."""


def _text(row: Mapping[str, Any], column: str) -> str | None:
    """Read a nullable text column, stringifying numeric storage classes."""
    value = row[column]
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, (int, float)):
        return str(value)
    raise RowConversionError(f"column {column!r} holds {type(value).__name__}")


def _integer(row: Mapping[str, Any], column: str) -> int | None:
    """Read a nullable integer column; text that is not an integer is an error."""
    value = row[column]
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise RowConversionError(f"column {column!r} is not an integer: {value!r}")


def _load_json(raw: str | None) -> Any:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (ValueError, RecursionError):
        return None


def parse_content(content_json: str | None) -> list[ContentBlock]:
    """Normalize a ``content_json`` payload. Unparseable JSON yields no blocks."""
    return normalize_content(
        _load_json(content_json),
        allow_bare_strings=True,
        allow_single_block=True,
        allow_nested=True,
    )


def parse_model_name(model_config_json: str | None) -> str:
    config = _load_json(model_config_json)
    if not isinstance(config, dict):
        return ""
    return get_str(config, "model")


def parse_extra_metadata(metadata_json: str | None) -> dict[str, str]:
    """Top-level string entries of ``metadata_json``; other values are dropped."""
    metadata = _load_json(metadata_json)
    if not isinstance(metadata, dict):
        return {}
    return string_entries(metadata)


def session_key(row: Mapping[str, Any]) -> int:
    key = _integer(row, "id")
    if key is None:
        raise RowConversionError("session id is NULL")
    return key


def message_from_row(row: Mapping[str, Any]) -> Message:
    """Build a Message from a ``messages`` row.

    The role is stored verbatim, whatever the store holds.
    """
    _integer(row, "id")  # validates the row key
    role = _text(row, "role")
    if role is None:
        raise RowConversionError("message role is NULL")

    metadata = MessageMetadata(extra=parse_extra_metadata(_text(row, "metadata_json")))
    tokens = _integer(row, "tokens")
    if tokens is not None:
        metadata.tokens = TokenUsage.from_total(tokens)

    return Message(
        uuid=_text(row, "message_id") or "",
        timestamp=parse_timestamp(row["created_timestamp"]),
        role=role,
        content=parse_content(_text(row, "content_json")),
        metadata=metadata,
    )


def session_from_row(row: Mapping[str, Any], messages: list[Message]) -> Session:
    """Build a Session from a ``sessions`` row and its already loaded messages."""
    key = session_key(row)

    extra: dict[str, str] = {}
    for column in _EXTRA_SESSION_COLUMNS:
        value = _text(row, column)
        if value is not None:
            extra[column] = value

    return Session(
        agent_type=AGENT_TYPE,
        session_id=str(key),
        created_at=parse_timestamp(row["created_at"]),
        updated_at=parse_timestamp(row["updated_at"]),
        metadata=SessionMetadata(
            working_dir=_text(row, "working_dir") or "",
            provider=_text(row, "provider_name") or "",
            model=parse_model_name(_text(row, "model_config_json")),
            name=_text(row, "name") or "",
            extra=extra,
        ),
        messages=messages,
    )

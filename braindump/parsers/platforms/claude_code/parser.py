"""Parse Claude Code JSONL transcripts into unified Session models."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator

from braindump.date_utils import parse_timestamp
from braindump.models import (
    Message,
    MessageMetadata,
    Session,
    SessionMetadata,
    Subagent,
    TokenUsage,
)
from braindump.parsers.content import normalize_content
from braindump.parsers.fields import get_bool, get_int, get_mapping, get_str
from braindump.parsers.results import ReadResult, log_skipped

logger = logging.getLogger("braindump.claude")

AGENT_TYPE = "claude"
SESSION_FILE_SUFFIX = ".jsonl"
SUBAGENTS_DIR_NAME = "subagents"
SUBAGENT_FILE_PREFIX = "agent-"

# Record types that carry a conversation turn. Everything else (summaries,
# system notices, file snapshots, progress events) only feeds session fields.
_MESSAGE_RECORD_TYPES = frozenset({"user", "assistant"})
_MESSAGE_ROLES = frozenset({"user", "assistant"})


def iter_records(path: Path) -> Iterator[dict[str, Any]]:
    """Yield every JSON object in a JSONL file, skipping blank and corrupt lines."""
    with path.open("r", encoding="utf-8", errors="replace") as handle:
        for line in handle:
            line = line.strip()
            if not line:
                continue
            try:
                record = json.loads(line)
            except (ValueError, RecursionError):
                continue
            if isinstance(record, dict):
                yield record


def _parse_token_usage(usage: dict[str, Any]) -> TokenUsage:
    return TokenUsage.from_counts(get_int(usage, "input_tokens"), get_int(usage, "output_tokens"))


def parse_message(record: dict[str, Any]) -> Message | None:
    """Convert one ``user``/``assistant`` record into a Message.

    Returns None when the record has no ``message`` object or its role is not
    one of the conversational roles.
    """
    message_data = get_mapping(record, "message")
    if message_data is None:
        return None

    role = get_str(message_data, "role")
    if role not in _MESSAGE_ROLES:
        return None

    metadata = MessageMetadata(
        is_sidechain=get_bool(record, "isSidechain"),
        agent_id=get_str(record, "agentId"),
        request_id=get_str(record, "requestId"),
        model=get_str(message_data, "model"),
    )
    usage = get_mapping(message_data, "usage")
    if usage is not None:
        metadata.tokens = _parse_token_usage(usage)

    return Message(
        uuid=get_str(record, "uuid"),
        parent_uuid=get_str(record, "parentUuid"),
        timestamp=parse_timestamp(get_str(record, "timestamp")),
        role=role,
        content=normalize_content(message_data.get("content")),
        metadata=metadata,
    )


@dataclass
class _Transcript:
    session_id: str = ""
    working_dir: str = ""
    git_branch: str = ""
    slug: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    messages: list[Message] = field(default_factory=list)

    def observe(self, record: dict[str, Any]) -> None:
        # First record carrying a field wins.
        if not self.session_id:
            self.session_id = get_str(record, "sessionId")
        if not self.working_dir:
            self.working_dir = get_str(record, "cwd")
        if not self.git_branch:
            self.git_branch = get_str(record, "gitBranch")
        if not self.slug:
            self.slug = get_str(record, "slug")

        timestamp = parse_timestamp(get_str(record, "timestamp"))
        if timestamp is not None:
            if self.created_at is None or timestamp < self.created_at:
                self.created_at = timestamp
            if self.updated_at is None or timestamp > self.updated_at:
                self.updated_at = timestamp

        if get_str(record, "type") in _MESSAGE_RECORD_TYPES:
            message = parse_message(record)
            if message is not None:
                self.messages.append(message)


def read_transcript(path: Path) -> _Transcript:
    """Fold every record of a transcript file into session-level state.

    Raises OSError when the file cannot be read.
    """
    transcript = _Transcript()
    for record in iter_records(path):
        transcript.observe(record)
    return transcript


def subagent_id_from_path(path: Path) -> str:
    stem = path.name[: -len(SESSION_FILE_SUFFIX)] if path.name.endswith(SESSION_FILE_SUFFIX) else path.name
    if stem.startswith(SUBAGENT_FILE_PREFIX):
        return stem[len(SUBAGENT_FILE_PREFIX):]
    return stem


def read_subagents(session_dir: Path, session_id: str, result: ReadResult) -> list[Subagent]:
    """Load ``<session_dir>/<session_id>/subagents/*.jsonl`` as Subagents."""
    if session_id in ("", ".", "..") or Path(session_id).name != session_id:
        return []
    subagents_dir = session_dir / session_id / SUBAGENTS_DIR_NAME
    if not subagents_dir.is_dir():
        return []

    try:
        candidates = sorted(subagents_dir.iterdir())
    except OSError as exc:
        result.skip(AGENT_TYPE, str(subagents_dir), f"failed to list subagents: {exc}")
        return []

    subagents: list[Subagent] = []
    for path in candidates:
        if not path.name.endswith(SESSION_FILE_SUFFIX):
            continue
        agent_id = subagent_id_from_path(path)
        try:
            transcript = read_transcript(path)
        except OSError as exc:
            result.skip(AGENT_TYPE, f"subagent {agent_id} of {session_id}", str(exc))
            continue
        except Exception as exc:
            logger.debug("Unexpected error parsing subagent %s", path, exc_info=True)
            result.skip(AGENT_TYPE, f"subagent {agent_id} of {session_id}", repr(exc))
            continue
        subagents.append(Subagent(agent_id=agent_id, slug=transcript.slug, messages=transcript.messages))
    return subagents


def parse_session_file(path: Path, result: ReadResult | None = None) -> Session:
    """Parse a single JSONL session log (plus its subagents) into a Session.

    Subagent failures are recorded on ``result`` when given, otherwise logged.
    Raises OSError when the session file itself cannot be read.
    """
    transcript = read_transcript(path)
    session_id = transcript.session_id or path.stem

    diagnostics: ReadResult = result if result is not None else ReadResult()
    subagents = read_subagents(path.parent, session_id, diagnostics)
    if result is None:
        log_skipped(diagnostics, logger)

    return Session(
        agent_type=AGENT_TYPE,
        session_id=session_id,
        created_at=transcript.created_at,
        updated_at=transcript.updated_at,
        metadata=SessionMetadata(
            working_dir=transcript.working_dir,
            git_branch=transcript.git_branch,
        ),
        messages=transcript.messages,
        subagents=subagents,
    )

"""Read Goose sessions from its SQLite session store."""
from __future__ import annotations

import logging
from pathlib import Path

import aiosqlite

from braindump.db.connection import open_store
from braindump.db.repositories import SqliteGooseSessionRepository
from braindump.models import Message, Session
from braindump.parsers.platforms.goose.parser import (
    AGENT_TYPE,
    RowConversionError,
    message_from_row,
    session_from_row,
    session_key,
)
from braindump.parsers.results import ReadResult

logger = logging.getLogger("braindump.goose")


async def _load_messages(
    repo: SqliteGooseSessionRepository,
    key: int,
    result: ReadResult[Session],
) -> list[Message]:
    messages: list[Message] = []
    for row in await repo.list_messages(key):
        try:
            messages.append(message_from_row(row))
        except RowConversionError as exc:
            result.skip(AGENT_TYPE, f"message row of session {key}", str(exc))
    return messages


async def read_sessions(db_path: Path) -> ReadResult[Session]:
    """Load every session (newest first) with its messages (oldest first).

    A missing store means no Goose sessions and is not an error. Store-level
    failures are recorded as a skipped unit and yield no sessions.
    """
    result: ReadResult[Session] = ReadResult()
    if not db_path.is_file():
        logger.debug("Goose session store not found: %s", db_path)
        return result

    try:
        async with open_store(db_path) as db:
            repo = SqliteGooseSessionRepository(db)
            session_rows = await repo.list_sessions()
            for row in session_rows:
                try:
                    key = session_key(row)
                except RowConversionError as exc:
                    result.skip(AGENT_TYPE, "session row", str(exc))
                    continue

                try:
                    messages = await _load_messages(repo, key, result)
                except aiosqlite.Error as exc:
                    result.skip(AGENT_TYPE, f"session {key}", f"failed to read messages: {exc}")
                    continue

                try:
                    session = session_from_row(row, messages)
                except RowConversionError as exc:
                    result.skip(AGENT_TYPE, f"session {key}", str(exc))
                    continue
                result.add(session)
    except aiosqlite.Error as exc:
        result.skip(AGENT_TYPE, str(db_path), f"failed to query sessions: {exc}")
        return result

    logger.info("Read %d Goose session(s) from %s", len(result.items), db_path)
    return result

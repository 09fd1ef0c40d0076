"""Queries against the Goose ``sessions`` and ``messages`` tables."""
from __future__ import annotations

import aiosqlite

_SESSIONS_QUERY = """
    SELECT id, name, description, user_set_name, session_type, working_dir,
           created_at, updated_at, extension_data, provider_name, model_config_json
    FROM sessions
    ORDER BY created_at DESC
"""

_MESSAGES_QUERY = """
    SELECT id, message_id, role, content_json, created_timestamp, tokens, metadata_json
    FROM messages
    WHERE session_id = ?
    ORDER BY created_timestamp ASC
"""


class SqliteGooseSessionRepository:
    """Read access to a Goose session store."""

    def __init__(self, db: aiosqlite.Connection):
        self.db = db

    async def list_sessions(self) -> list[aiosqlite.Row]:
        """All session rows, newest first."""
        async with self.db.execute(_SESSIONS_QUERY) as cur:
            return list(await cur.fetchall())

    async def list_messages(self, session_id: int) -> list[aiosqlite.Row]:
        """Message rows of one session, oldest first."""
        async with self.db.execute(_MESSAGES_QUERY, (session_id,)) as cur:
            return list(await cur.fetchall())

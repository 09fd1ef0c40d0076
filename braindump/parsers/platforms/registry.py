"""Session source registry.

Runs the per-agent readers one after another and concatenates their sessions.
"""
from __future__ import annotations

import logging

from braindump.config import Settings
from braindump.models import Session
from braindump.parsers.platforms.claude_code import reader as claude_code_reader
from braindump.parsers.platforms.goose import reader as goose_reader
from braindump.parsers.results import ReadResult, log_skipped

logger = logging.getLogger("braindump")


def _selected(agent_type: str, name: str) -> bool:
    return agent_type == "" or agent_type == name


async def read_all_sessions(settings: Settings, agent_type: str = "") -> ReadResult[Session]:
    """Read Claude Code then Goose sessions.

    ``agent_type`` restricts which sources are read at all; an empty value
    reads both.
    """
    result: ReadResult[Session] = ReadResult()
    if _selected(agent_type, claude_code_reader.AGENT_TYPE):
        result.extend(claude_code_reader.scan_sessions(settings.claude_projects_dir))
    if _selected(agent_type, goose_reader.AGENT_TYPE):
        result.extend(await goose_reader.read_sessions(settings.goose_db_path))
    return result


async def collect_sessions(settings: Settings, agent_type: str = "") -> list[Session]:
    """Read the selected sources and log every skipped unit as a warning."""
    result = await read_all_sessions(settings, agent_type)
    log_skipped(result, logger)
    logger.info("Collected %d session(s), skipped %d unit(s)", len(result.items), len(result.skipped))
    return result.items

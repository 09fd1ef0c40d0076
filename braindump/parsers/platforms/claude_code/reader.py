"""Discover Claude Code transcripts under the projects directory."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator

from braindump.models import Session
from braindump.parsers.platforms.claude_code.parser import (
    AGENT_TYPE,
    SESSION_FILE_SUFFIX,
    SUBAGENTS_DIR_NAME,
    parse_session_file,
)
from braindump.parsers.results import ReadResult

logger = logging.getLogger("braindump.claude")


def iter_session_files(projects_dir: Path, result: ReadResult) -> Iterator[Path]:
    """Walk the projects tree in sorted order, pruning ``subagents`` directories."""

    def _on_error(exc: OSError) -> None:
        result.skip(AGENT_TYPE, str(exc.filename or projects_dir), f"failed to list directory: {exc}")

    for root, dirnames, filenames in os.walk(projects_dir, onerror=_on_error):
        dirnames[:] = sorted(name for name in dirnames if name != SUBAGENTS_DIR_NAME)
        for filename in sorted(filenames):
            if filename.endswith(SESSION_FILE_SUFFIX):
                yield Path(root) / filename


def scan_sessions(projects_dir: Path) -> ReadResult[Session]:
    """Parse every session transcript below ``projects_dir``.

    A missing directory means no Claude Code sessions and is not an error.
    """
    result: ReadResult[Session] = ReadResult()
    if not projects_dir.is_dir():
        logger.debug("Claude Code projects directory not found: %s", projects_dir)
        return result

    for path in iter_session_files(projects_dir, result):
        try:
            session = parse_session_file(path, result)
        except OSError as exc:
            result.skip(AGENT_TYPE, str(path), f"failed to read session: {exc}")
            continue
        except Exception as exc:
            logger.debug("Unexpected error parsing %s", path, exc_info=True)
            result.skip(AGENT_TYPE, str(path), f"failed to parse session: {exc!r}")
            continue
        result.add(session)

    logger.info("Read %d Claude Code session(s) from %s", len(result.items), projects_dir)
    return result

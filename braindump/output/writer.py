"""Serialize sessions into the versioned JSON envelope."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import TextIO

from braindump.config import OUTPUT_VERSION
from braindump.models import Envelope, Session


def build_envelope(sessions: list[Session], generated_at: datetime | None = None) -> Envelope:
    return Envelope(
        version=OUTPUT_VERSION,
        generated_at=generated_at or datetime.now(timezone.utc),
        sessions=sessions,
    )


def render_envelope(envelope: Envelope, pretty: bool = False) -> str:
    """Compact or 2-space indented JSON, always newline terminated."""
    return envelope.model_dump_json(indent=2 if pretty else None) + "\n"


def write_envelope(
    sessions: list[Session],
    stream: TextIO,
    pretty: bool = False,
    generated_at: datetime | None = None,
) -> None:
    stream.write(render_envelope(build_envelope(sessions, generated_at), pretty=pretty))

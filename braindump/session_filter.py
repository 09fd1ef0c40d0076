"""Declarative filtering over the unified session list."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, field_validator

from braindump.models import Session


class FilterOptions(BaseModel):
    """Predicates combined with AND. Unset predicates match everything."""

    agent_type: str = ""
    session_id: str = ""
    since: Optional[datetime] = None
    until: Optional[datetime] = None

    @field_validator("since", "until")
    @classmethod
    def assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


def should_include(session: Session, options: FilterOptions) -> bool:
    if options.agent_type and session.agent_type.lower() != options.agent_type.lower():
        return False

    if options.session_id and session.session_id != options.session_id:
        return False

    # Bounds are inclusive. An unknown start counts as the earliest instant:
    # it fails ``since`` and satisfies ``until``.
    if options.since is not None:
        if session.created_at is None or session.created_at < options.since:
            return False

    if options.until is not None:
        if session.created_at is not None and session.created_at > options.until:
            return False

    return True


def apply_filters(sessions: list[Session], options: FilterOptions) -> list[Session]:
    """Return a new list with the sessions matching ``options``."""
    return [session for session in sessions if should_include(session, options)]

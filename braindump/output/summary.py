"""Human-readable session digests."""
from __future__ import annotations

import textwrap
from typing import TextIO

from braindump.date_utils import format_summary_time
from braindump.models import Message, Session, TextBlock

_SEPARATOR = "=" * 80
_PROMPT_WIDTH = 76
_AGENT_WIDTH = 74
_LAST_AGENT_MESSAGES = 2
_NON_TEXT_PLACEHOLDER = "[Tool use or non-text content]"


def wrap_text(text: str, width: int) -> str:
    if len(text) <= width:
        return text
    wrapped = textwrap.fill(text, width=width, break_long_words=False, break_on_hyphens=False)
    return wrapped or text


def message_text(message: Message) -> str:
    """Join the non-empty text blocks of a message; tool blocks are ignored."""
    return " ".join(block.text for block in message.content if isinstance(block, TextBlock) and block.text)


def _first_by_role(messages: list[Message], role: str) -> Message | None:
    return next((message for message in messages if message.role == role), None)


def _last_by_role(messages: list[Message], role: str) -> Message | None:
    return next((message for message in reversed(messages) if message.role == role), None)


def _last_n_by_role(messages: list[Message], role: str, count: int) -> list[Message]:
    picked = [message for message in messages if message.role == role]
    return picked[-count:] if count > 0 else []


def _count_by_role(messages: list[Message], role: str) -> int:
    return sum(1 for message in messages if message.role == role)


def _indent(text: str, prefix: str) -> str:
    return text.replace("\n", "\n" + prefix)


def render_session_summary(session: Session) -> str:
    lines = [
        "",
        f"📋 Session: {session.session_id}",
        f"   Agent: {session.agent_type}",
        f"   Created: {format_summary_time(session.created_at)}",
    ]
    if session.metadata.working_dir:
        lines.append(f"   Working Dir: {session.metadata.working_dir}")
    if session.metadata.model:
        lines.append(f"   Model: {session.metadata.model}")

    first_user = _first_by_role(session.messages, "user")
    last_user = _last_by_role(session.messages, "user")
    last_agent = _last_n_by_role(session.messages, "assistant", _LAST_AGENT_MESSAGES)

    if first_user is not None:
        lines.append("")
        lines.append("🚀 Initial User Prompt:")
        lines.append("   " + _indent(wrap_text(message_text(first_user), _PROMPT_WIDTH), "   "))

    if last_user is not None and last_user is not first_user:
        lines.append("")
        lines.append("💬 Last User Prompt:")
        lines.append("   " + _indent(wrap_text(message_text(last_user), _PROMPT_WIDTH), "   "))

    if last_agent:
        lines.append("")
        lines.append(f"🤖 Last {len(last_agent)} Agent Message(s):")
        for idx, message in enumerate(last_agent, start=1):
            content = message_text(message) or _NON_TEXT_PLACEHOLDER
            lines.append("")
            lines.append(f"   [{idx}] " + _indent(wrap_text(content, _AGENT_WIDTH), "       "))

    user_count = _count_by_role(session.messages, "user")
    agent_count = _count_by_role(session.messages, "assistant")
    lines.append("")
    lines.append("📊 Statistics:")
    lines.append(
        f"   Total Messages: {len(session.messages)} (User: {user_count}, Agent: {agent_count})"
    )
    if session.subagents:
        lines.append(f"   Subagents: {len(session.subagents)}")

    return "\n".join(lines) + "\n"


def write_summary(sessions: list[Session], stream: TextIO) -> None:
    if not sessions:
        stream.write("No sessions found.\n")
        return

    for idx, session in enumerate(sessions):
        if idx > 0:
            stream.write("\n" + _SEPARATOR + "\n")
        stream.write(render_session_summary(session))

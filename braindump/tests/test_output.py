import io
import json
import unittest
from datetime import datetime, timezone

from braindump.models import (
    Envelope,
    Message,
    MessageMetadata,
    Session,
    SessionMetadata,
    Subagent,
    TextBlock,
    TokenUsage,
    ToolUseBlock,
)
from braindump.output import build_envelope, write_envelope, write_summary
from braindump.output.summary import message_text, render_session_summary, wrap_text

GENERATED_AT = datetime(2026, 2, 1, 8, 0, tzinfo=timezone.utc)


def _session() -> Session:
    return Session(
        agent_type="claude",
        session_id="abc",
        created_at=datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc),
        updated_at=datetime(2026, 1, 15, 10, 0, tzinfo=timezone.utc),
        metadata=SessionMetadata(working_dir="/home/dev/project", model="claude-sonnet-4"),
        messages=[
            Message(role="user", content=[TextBlock(text="Fix the login bug")]),
            Message(
                role="assistant",
                content=[ToolUseBlock(tool_name="Read", tool_use_id="t1", tool_input={"path": "auth.py"})],
                metadata=MessageMetadata(tokens=TokenUsage.from_counts(10, 5)),
            ),
            Message(role="user", content=[TextBlock(text="Also add a test")]),
            Message(role="assistant", content=[TextBlock(text="Done."), TextBlock(text="Tests pass.")]),
        ],
    )


class WireFormatTests(unittest.TestCase):
    def test_bare_session_keeps_required_keys_only(self) -> None:
        data = Session(agent_type="claude", session_id="s1").model_dump(mode="json")
        self.assertEqual(
            data,
            {"agent_type": "claude", "session_id": "s1", "created_at": None, "updated_at": None, "messages": []},
        )

    def test_zero_valued_message_fields_are_omitted(self) -> None:
        data = Message(role="user").model_dump(mode="json")
        self.assertEqual(data, {"role": "user", "content": []})

    def test_block_type_is_always_written(self) -> None:
        self.assertEqual(TextBlock().model_dump(mode="json"), {"type": "text"})
        self.assertEqual(
            ToolUseBlock(tool_name="Bash").model_dump(mode="json"),
            {"type": "tool_use", "tool_name": "Bash"},
        )

    def test_token_totals_survive_and_zero_tokens_vanish(self) -> None:
        metadata = MessageMetadata(tokens=TokenUsage.from_total(42)).model_dump(mode="json")
        self.assertEqual(metadata, {"tokens": {"total_tokens": 42}})
        self.assertEqual(MessageMetadata(tokens=TokenUsage()).model_dump(mode="json"), {})

    def test_empty_subagent_keeps_messages(self) -> None:
        self.assertEqual(Subagent(agent_id="x").model_dump(mode="json"), {"agent_id": "x", "messages": []})

    def test_envelope_round_trip(self) -> None:
        envelope = build_envelope([_session()], generated_at=GENERATED_AT)
        restored = Envelope.model_validate_json(envelope.model_dump_json())
        self.assertEqual(restored, envelope)
        self.assertIsInstance(restored.sessions[0].messages[1].content[0], ToolUseBlock)


class WriteEnvelopeTests(unittest.TestCase):
    def test_compact_output_is_single_line(self) -> None:
        stream = io.StringIO()
        write_envelope([_session()], stream, generated_at=GENERATED_AT)
        text = stream.getvalue()
        self.assertTrue(text.endswith("\n"))
        self.assertEqual(text.count("\n"), 1)
        payload = json.loads(text)
        self.assertEqual(payload["version"], "1.0.0")
        self.assertEqual(payload["generated_at"], "2026-02-01T08:00:00Z")
        self.assertEqual(payload["sessions"][0]["session_id"], "abc")

    def test_pretty_output_is_indented(self) -> None:
        stream = io.StringIO()
        write_envelope([], stream, pretty=True, generated_at=GENERATED_AT)
        text = stream.getvalue()
        self.assertIn('\n  "version": "1.0.0"', text)
        self.assertEqual(json.loads(text)["sessions"], [])
        self.assertTrue(text.endswith("}\n"))

    def test_generated_at_defaults_to_now(self) -> None:
        before = datetime.now(timezone.utc)
        envelope = build_envelope([])
        self.assertGreaterEqual(envelope.generated_at, before)
        self.assertEqual(envelope.sessions, [])


class SummaryTests(unittest.TestCase):
    def test_empty_list(self) -> None:
        stream = io.StringIO()
        write_summary([], stream)
        self.assertEqual(stream.getvalue(), "No sessions found.\n")

    def test_session_digest(self) -> None:
        text = render_session_summary(_session())

        self.assertIn("📋 Session: abc", text)
        self.assertIn("   Agent: claude", text)
        self.assertIn("   Created: 2026-01-15 09:30:00", text)
        self.assertIn("   Working Dir: /home/dev/project", text)
        self.assertIn("   Model: claude-sonnet-4", text)
        self.assertIn("🚀 Initial User Prompt:\n   Fix the login bug", text)
        self.assertIn("💬 Last User Prompt:\n   Also add a test", text)
        self.assertIn("🤖 Last 2 Agent Message(s):", text)
        self.assertIn("   [1] [Tool use or non-text content]", text)
        self.assertIn("   [2] Done. Tests pass.", text)
        self.assertIn("   Total Messages: 4 (User: 2, Agent: 2)", text)
        self.assertNotIn("Subagents:", text)

    def test_single_user_prompt_is_not_repeated(self) -> None:
        session = Session(
            agent_type="goose",
            session_id="9",
            messages=[Message(role="user", content=[TextBlock(text="only")])],
        )
        text = render_session_summary(session)
        self.assertIn("Created: unknown", text)
        self.assertNotIn("Last User Prompt", text)
        self.assertNotIn("Agent Message(s)", text)
        self.assertNotIn("Working Dir", text)

    def test_subagent_count(self) -> None:
        session = _session()
        session.subagents = [Subagent(agent_id="a"), Subagent(agent_id="b")]
        self.assertIn("   Subagents: 2", render_session_summary(session))

    def test_sessions_are_separated(self) -> None:
        stream = io.StringIO()
        write_summary([_session(), _session()], stream)
        self.assertEqual(stream.getvalue().count("=" * 80), 1)

    def test_wrap_text(self) -> None:
        self.assertEqual(wrap_text("short", 10), "short")
        wrapped = wrap_text("alpha beta gamma delta", 11)
        self.assertEqual(wrapped.split("\n"), ["alpha beta", "gamma delta"])

    def test_message_text_ignores_tool_blocks(self) -> None:
        message = Message(
            role="assistant",
            content=[TextBlock(text="a"), ToolUseBlock(tool_name="x"), TextBlock(text=""), TextBlock(text="b")],
        )
        self.assertEqual(message_text(message), "a b")


if __name__ == "__main__":
    unittest.main()

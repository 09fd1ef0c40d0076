"""Claude Code line-log (JSONL) source."""

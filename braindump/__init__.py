"""Unified dump of AI-agent session histories (Claude Code, Goose)."""

__version__ = "0.1.0"

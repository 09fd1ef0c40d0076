"""Per-agent session sources."""

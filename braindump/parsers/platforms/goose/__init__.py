"""Goose SQLite session store source."""

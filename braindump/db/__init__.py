"""SQLite access for the Goose session store."""

from .goose_sessions import SqliteGooseSessionRepository

__all__ = ["SqliteGooseSessionRepository"]

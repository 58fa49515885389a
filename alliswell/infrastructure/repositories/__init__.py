from .session_store import (
    DatabaseSessionStore,
    RedisSessionStore,
    SessionStore,
    SessionStoreError,
)

__all__ = [
    "DatabaseSessionStore",
    "RedisSessionStore",
    "SessionStore",
    "SessionStoreError",
]

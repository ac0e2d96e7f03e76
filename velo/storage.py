"""
SQLite-backed key/value string store.

Plays the part a browser's local storage plays for a web client: it holds
the bearer token attached to outbound requests and the per-user AI chat
history kept in mock mode.
"""
import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, List, Dict, Any

from config.settings import settings

logger = logging.getLogger("storage")

AUTH_TOKEN_KEY = "auth_token"
CHAT_HISTORY_PREFIX = "ai_chat_history_"


SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


class LocalStorage:
    """
    Persistent string store keyed by name.

    Values are plain strings; JSON helpers are provided for structured data.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _init_db(self):
        """Initialize database with schema."""
        with self._get_connection() as conn:
            conn.executescript(SCHEMA)
            conn.commit()

    @contextmanager
    def _get_connection(self):
        """Get a database connection."""
        conn = sqlite3.connect(str(self.db_path))
        try:
            yield conn
        finally:
            conn.close()

    def get_item(self, key: str) -> Optional[str]:
        """Return the string stored under key, or None."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        """Store a string under key, replacing any previous value."""
        now = datetime.now(timezone.utc).isoformat()
        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value,
                                               updated_at = excluded.updated_at
                """,
                (key, value, now),
            )
            conn.commit()

    def remove_item(self, key: str) -> bool:
        """Delete key. Returns True if something was removed."""
        with self._get_connection() as conn:
            cursor = conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            conn.commit()
            return cursor.rowcount > 0

    def keys(self) -> List[str]:
        with self._get_connection() as conn:
            return [row[0] for row in conn.execute("SELECT key FROM kv_store ORDER BY key")]

    # =========================================================================
    # Typed helpers
    # =========================================================================

    def get_auth_token(self) -> Optional[str]:
        return self.get_item(AUTH_TOKEN_KEY)

    def set_auth_token(self, token: Optional[str]) -> None:
        """Store the bearer token, or forget it when token is None."""
        if token is None:
            self.remove_item(AUTH_TOKEN_KEY)
        else:
            self.set_item(AUTH_TOKEN_KEY, token)

    def get_chat_history(self, user_id: str) -> List[Dict[str, Any]]:
        """Return a user's saved chat turns (empty list if none)."""
        raw = self.get_item(CHAT_HISTORY_PREFIX + user_id)
        if raw is None:
            return []
        try:
            history = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Discarding unreadable chat history for user {user_id}")
            return []
        return history if isinstance(history, list) else []

    def save_chat_history(self, user_id: str, history: List[Dict[str, Any]]) -> None:
        self.set_item(CHAT_HISTORY_PREFIX + user_id, json.dumps(history, ensure_ascii=False))

    def clear_chat_history(self, user_id: str) -> bool:
        return self.remove_item(CHAT_HISTORY_PREFIX + user_id)


# Global storage instance
_storage: Optional[LocalStorage] = None


def get_local_storage() -> LocalStorage:
    """Get the local storage instance."""
    global _storage
    if _storage is None:
        _storage = LocalStorage(settings.local_storage_path)
    return _storage

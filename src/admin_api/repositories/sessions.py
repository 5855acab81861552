import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from src.admin_api import db

logger = logging.getLogger(__name__)


class SessionRepository:
    """Server-side login sessions, one row per signed-in client."""

    # PUBLIC_INTERFACE
    def open(self, id_user: int, ttl: timedelta) -> Dict[str, Any]:
        """Create a session for a user and return its row."""
        session_id = secrets.token_urlsafe(32)
        expires = datetime.now(timezone.utc) + ttl
        row = db.execute_returning_one(
            "INSERT INTO sessions (id, id_user, expires) VALUES (%s, %s, %s) RETURNING id, id_user, created, expires",
            [session_id, id_user, expires],
        )
        logger.info("Session opened", extra={"user_id": id_user})
        return row

    # PUBLIC_INTERFACE
    def get_active(self, session_id: str) -> Optional[Dict[str, Any]]:
        """Unexpired session joined with its user, or None."""
        return db.fetch_one(
            """
            SELECT s.id AS session_id, s.expires, u.id, u.firstname, u.lastname, u.email, u.phone,
                   u.admin, u.created, u.modified
            FROM sessions s
            JOIN users u ON u.id = s.id_user
            WHERE s.id=%s AND s.expires > NOW()
            """,
            [session_id],
        )

    # PUBLIC_INTERFACE
    def close(self, session_id: str) -> bool:
        return db.execute("DELETE FROM sessions WHERE id=%s", [session_id]) > 0

    # PUBLIC_INTERFACE
    def purge_expired(self) -> int:
        """Drop expired sessions; returns how many were removed."""
        removed = db.execute("DELETE FROM sessions WHERE expires <= NOW()")
        if removed:
            logger.info("Purged %d expired session(s)", removed)
        return removed

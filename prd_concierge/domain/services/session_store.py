"""In-memory session store."""

import logging
import threading
from datetime import datetime, timedelta, UTC
from typing import Any, Callable, Dict, List, Optional

from prd_concierge.domain.schemas.session import Session, Turn, TurnRole

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class SessionStore:
    """
    Owns the mapping from session id to Session.

    Sessions live only as long as the process. Every operation takes the
    store lock, so an expiry sweep never removes a session while another
    store call is touching it.
    """

    def __init__(
        self,
        timeout_minutes: int = 30,
        max_turns: int = 50,
        clock: Optional[Clock] = None,
    ):
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()
        self._timeout = timedelta(minutes=timeout_minutes)
        self._max_turns = max_turns
        self._clock = clock or _utcnow

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            return session_id in self._sessions

    def _is_expired(self, session: Session, now: datetime) -> bool:
        return now - session.last_activity > self._timeout

    def resume(self, session_id: Optional[str]) -> Optional[Session]:
        """
        Return the live session for ``session_id`` with its activity refreshed.

        Unknown ids give None. Expired sessions are discarded and also give None.
        """
        if not session_id:
            return None
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            now = self._clock()
            if self._is_expired(session, now):
                del self._sessions[session_id]
                logger.info(f"Session {session_id} expired", extra={"session_id": session_id})
                return None
            session.last_activity = now
            return session

    def new_session(self) -> Session:
        """A fresh session that is not stored until ``save``."""
        return Session.create(now=self._clock())

    def get_or_create(self, session_id: Optional[str] = None) -> Session:
        """
        Return the live session for ``session_id`` or a brand-new stored one.

        Unknown ids and expired sessions both yield a new session with a
        freshly generated id. Expired sessions are discarded, not resumed.
        """
        session = self.resume(session_id)
        if session is not None:
            return session

        session = self.new_session()
        self.save(session)
        logger.info(f"Created session {session.id}", extra={"session_id": session.id})
        return session

    def get(self, session_id: str) -> Optional[Session]:
        """Plain lookup with no expiry check and no activity refresh."""
        with self._lock:
            return self._sessions.get(session_id)

    def record_turn(
        self,
        session: Session,
        role: TurnRole,
        content: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Turn:
        """Append a turn, refresh activity and keep only the newest ``max_turns``."""
        with self._lock:
            now = self._clock()
            turn = Turn(role=role, content=content, timestamp=now, metadata=dict(metadata or {}))
            session.turns.append(turn)
            session.last_activity = now
            if len(session.turns) > self._max_turns:
                session.turns = session.turns[-self._max_turns:]
            return turn

    def save(self, session: Session) -> None:
        """Store ``session`` under its id, replacing whatever was there."""
        with self._lock:
            self._sessions[session.id] = session

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def sweep_expired(self) -> int:
        """Remove every session idle for longer than the timeout. Returns the count."""
        with self._lock:
            now = self._clock()
            expired: List[str] = [
                sid for sid, session in self._sessions.items()
                if self._is_expired(session, now)
            ]
            for sid in expired:
                del self._sessions[sid]

        if expired:
            logger.info(f"Swept {len(expired)} expired session(s)")
        return len(expired)

    def summarize(self, session_id: str) -> Optional[str]:
        """Human-readable snapshot of a session, or None when unknown."""
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None

            context = session.context
            project_type = context.project_type.value if context.project_type else "undetermined"
            return "\n".join([
                f"Session summary ({session.id}):",
                f"- Project type: {project_type}",
                f"- Detected features: {', '.join(context.detected_features) or 'none'}",
                f"- Tech preferences: {', '.join(context.tech_preferences) or 'none'}",
                f"- Turns: {session.turn_count}",
                f"- Readiness: {session.score}%",
                f"- Status: {session.status.value}",
            ])

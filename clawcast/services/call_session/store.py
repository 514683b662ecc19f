"""In-memory conversation store keyed by call id."""
import logging
import time
from typing import Dict, List, Literal, Optional

from clawcast.services.call_session.models import CallSession, Turn

logger = logging.getLogger(__name__)

DEFAULT_MAX_TURNS = 40


class SessionStore:
    """
    Owns the conversation transcript of every in-flight call.

    None of the methods suspend, so each append-and-truncate runs as one step
    on the event loop and needs no lock.
    """

    def __init__(self, max_turns: int = DEFAULT_MAX_TURNS):
        if max_turns < 1:
            raise ValueError(f"max_turns must be positive, got {max_turns}")
        self.max_turns = max_turns
        self._sessions: Dict[str, CallSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, call_id: object) -> bool:
        return call_id in self._sessions

    def get_or_create(self, call_id: str) -> CallSession:
        """Return the session for a call, creating an empty one if needed."""
        session = self._sessions.get(call_id)
        if session is None:
            session = CallSession(call_id=call_id)
            self._sessions[call_id] = session
            logger.debug(f"[SESSION STORE] Created session - CallId: {call_id}")
        return session

    def append_user_turn(self, call_id: str, text: str) -> None:
        """Record what the caller said."""
        self._append(call_id, "user", text)

    def append_assistant_turn(self, call_id: str, text: str) -> None:
        """
        Record what the agent replied.

        Dropped if the call ended while the reply was being generated, so a
        removed session is never brought back.
        """
        self._append(call_id, "assistant", text, create=False)

    def _append(
        self,
        call_id: str,
        role: Literal["user", "assistant"],
        text: str,
        create: bool = True,
    ) -> None:
        if create:
            session = self.get_or_create(call_id)
        else:
            session = self._sessions.get(call_id)
            if session is None:
                logger.debug(
                    f"[SESSION STORE] Dropped {role} turn for ended call - CallId: {call_id}"
                )
                return
        session.turns.append(Turn(role=role, content=text))

        # Drop the oldest turns first
        overflow = len(session.turns) - self.max_turns
        if overflow > 0:
            del session.turns[:overflow]
            logger.debug(
                f"[SESSION STORE] Truncated {overflow} turn(s) - CallId: {call_id}"
            )
        session.touch()

    def snapshot(self, call_id: str) -> List[Turn]:
        """
        Get the current turns for a call, oldest first.

        Returns a copy, so later appends do not leak into a request that is
        already in flight. Unknown calls yield an empty list and are not created.
        """
        session = self._sessions.get(call_id)
        if session is None:
            return []
        return list(session.turns)

    def remove(self, call_id: str) -> bool:
        """Forget a call. Returns False if it was not tracked."""
        return self._sessions.pop(call_id, None) is not None

    def evict_idle(
        self, max_idle_seconds: float, now: Optional[float] = None
    ) -> List[str]:
        """
        Remove sessions that saw no activity for longer than max_idle_seconds.

        Covers calls whose end-of-call status event never arrived.

        Returns:
            Call ids that were evicted
        """
        now = time.monotonic() if now is None else now
        expired = [
            call_id
            for call_id, session in self._sessions.items()
            if session.idle_for(now) > max_idle_seconds
        ]
        for call_id in expired:
            del self._sessions[call_id]
        return expired

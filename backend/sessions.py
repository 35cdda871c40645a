"""In-memory registry of running game sessions.

Single process, single event loop: no locking. Sessions are not persisted;
only finished runs reach the archive. The registry holds at most
``max_sessions`` games and forgets the least recently used one when full.
"""

import logging
from collections import OrderedDict

from textventure.game import GameSession

logger = logging.getLogger(__name__)

MAX_SESSIONS = 200


class SessionStore:
    def __init__(self, max_sessions: int = MAX_SESSIONS) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, GameSession] = OrderedDict()

    def add(self, session: GameSession) -> GameSession:
        self._sessions[session.id] = session
        self._sessions.move_to_end(session.id)
        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info("session %s evicted (store full)", evicted)
        logger.debug("session %s registered (%d live)", session.id, len(self._sessions))
        return session

    def get(self, session_id: str) -> GameSession | None:
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
        return session

    def discard(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

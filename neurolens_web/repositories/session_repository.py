from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass, field

from neurolens_web.services.analysis_session import AnalysisSession


@dataclass
class SessionRepository:
    """
    Repository pattern: owns the in-memory AnalysisSession per browser session id.
    Least recently used sessions are evicted once max_sessions is reached.
    """
    max_sessions: int = 256
    _sessions: "OrderedDict[str, AnalysisSession]" = field(default_factory=OrderedDict, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def get_or_create(self, session_id: str) -> AnalysisSession:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                session = AnalysisSession()
                self._sessions[session_id] = session
                while len(self._sessions) > max(self.max_sessions, 1):
                    self._sessions.popitem(last=False)
            else:
                self._sessions.move_to_end(session_id)
            return session

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

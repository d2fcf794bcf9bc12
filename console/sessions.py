"""In-memory registry of per-browser console sessions."""

import uuid
from collections import OrderedDict
from typing import Callable, Optional, Tuple

from loguru import logger

from .state import VoiceConsole


class ConsoleSessions:
    """Maps session ids to their VoiceConsole.

    Nothing is persisted. Once ``max_sessions`` is reached the least
    recently used session is dropped.
    """

    def __init__(self, console_factory: Callable[[], VoiceConsole], max_sessions: int = 256):
        self.console_factory = console_factory
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, VoiceConsole]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def get_or_create(self, session_id: Optional[str]) -> Tuple[str, VoiceConsole]:
        """Look up a session, creating it when the id is unknown.

        Returns:
            The (possibly new) session id and its console
        """
        if session_id and session_id in self._sessions:
            self._sessions.move_to_end(session_id)
            return session_id, self._sessions[session_id]

        session_id = uuid.uuid4().hex
        console = self.console_factory()
        self._sessions[session_id] = console
        logger.info(f"Console session created: {session_id}")

        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info(f"Console session evicted: {evicted}")

        return session_id, console


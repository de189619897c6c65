"""In-memory store of per-conversation sessions."""
import logging
import threading
from contextlib import contextmanager
from typing import Callable, ContextManager, Dict, Iterator, Optional

from minesweeper_bot.types import DEFAULT_SETTINGS, Game, InputState, Session, Settings

logger = logging.getLogger(__name__)


class SessionStore:
    """Maps a session id to its game, settings and input state.

    Sessions are created on first use and live until :meth:`close`. Callers
    that perform read-modify-write sequences wrap them in :meth:`lock` so that
    two actions on the same session never interleave.
    """

    def __init__(self, lock_factory: Callable[[], ContextManager] = threading.RLock):
        self._sessions: Dict[str, Session] = {}
        self._locks: Dict[str, ContextManager] = {}
        self._lock_factory = lock_factory
        self._registry_lock = lock_factory()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    @contextmanager
    def lock(self, session_id: str) -> Iterator[Session]:
        """Hold the per-session lock and yield the session record."""
        with self._registry_lock:
            session_lock = self._locks.get(session_id)
            if session_lock is None:
                session_lock = self._locks[session_id] = self._lock_factory()
        with session_lock:
            yield self.get_or_create(session_id)

    def get_or_create(self, session_id: str) -> Session:
        with self._registry_lock:
            session = self._sessions.get(session_id)
            if session is None:
                session = self._sessions[session_id] = Session(session_id=session_id)
                logger.info(f"Created session {session_id}")
            return session

    def get_settings(self, session_id: str) -> Settings:
        return self.get_or_create(session_id).settings or DEFAULT_SETTINGS

    def set_settings(self, session_id: str, settings: Settings) -> None:
        self.get_or_create(session_id).settings = settings

    def get_game(self, session_id: str) -> Optional[Game]:
        return self.get_or_create(session_id).game

    def set_game(self, session_id: str, game: Game) -> None:
        self.get_or_create(session_id).game = game

    def get_input_state(self, session_id: str) -> InputState:
        return self.get_or_create(session_id).input_state

    def set_input_state(self, session_id: str, state: InputState) -> None:
        self.get_or_create(session_id).input_state = state

    def is_awaiting_custom_input(self, session_id: str) -> bool:
        return self.get_input_state(session_id) == InputState.AWAITING_CUSTOM_SETTINGS

    def set_awaiting_custom_input(self, session_id: str, awaiting: bool) -> None:
        state = InputState.AWAITING_CUSTOM_SETTINGS if awaiting else InputState.IDLE
        self.set_input_state(session_id, state)

    def close(self) -> None:
        """Drop every session; called when the hosting process stops."""
        with self._registry_lock:
            count = len(self._sessions)
            self._sessions.clear()
            self._locks.clear()
        logger.info(f"Session store closed, dropped {count} session(s)")

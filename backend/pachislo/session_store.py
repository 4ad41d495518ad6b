"""In-process session registry for the HTTP boundary."""
import logging
import threading
import uuid
from typing import Any

from pachislo.errors import ErrorCode, PachisloError
from pachislo.logic.models import ControlFlow, GameState
from pachislo.output import RecordingOutput
from pachislo.session import GameSession


logger = logging.getLogger(__name__)


class SessionEntry:
    """A session plus the recorder that captures its events."""

    def __init__(self, session_id: str, session: GameSession, recorder: RecordingOutput):
        self.session_id = session_id
        self.session = session
        self.recorder = recorder
        self._lock = threading.Lock()

    def execute(self, command: str) -> tuple[ControlFlow, GameState, list[dict[str, Any]]]:
        """
        Run one command and collect exactly the events it produced.

        The entry lock spans the command and the drain so events from
        concurrent requests never interleave.
        """
        with self._lock:
            try:
                control = self.session.run_step_with_command(command)
                return control, self.session.state, self.recorder.drain()
            except Exception:
                self.recorder.drain()
                raise


class SessionStore:
    """
    Sessions live in this process only; nothing is persisted.

    The store lock guards the registry. Each session serializes its own
    commands with its session lock.
    """

    def __init__(self):
        self._sessions: dict[str, SessionEntry] = {}
        self._lock = threading.Lock()

    def add(self, session: GameSession, recorder: RecordingOutput) -> SessionEntry:
        session_id = str(uuid.uuid4())
        entry = SessionEntry(session_id, session, recorder)
        with self._lock:
            self._sessions[session_id] = entry
        logger.info("Session %s registered (%d active)", session_id, len(self._sessions))
        return entry

    def get(self, session_id: str) -> SessionEntry:
        """Raises SESSION_NOT_FOUND for unknown ids."""
        with self._lock:
            entry = self._sessions.get(session_id)
        if entry is None:
            raise PachisloError(
                ErrorCode.SESSION_NOT_FOUND,
                f"Session {session_id} does not exist.",
            )
        return entry

    def remove(self, session_id: str) -> None:
        with self._lock:
            entry = self._sessions.pop(session_id, None)
        if entry is None:
            raise PachisloError(
                ErrorCode.SESSION_NOT_FOUND,
                f"Session {session_id} does not exist.",
            )
        logger.info("Session %s removed", session_id)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


# Global instance
session_store = SessionStore()

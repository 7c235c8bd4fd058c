"""FormRuntime: session management for the apartment search intake form.

The runtime opens form sessions, hands out their engines, and ends them on
submit or when the user navigates away. Ending a session discards its
records; nothing is retained.

Usage:
    >>> runtime = FormRuntime()
    >>> session = runtime.open_session()
    >>> session["state"]
    'active'
    >>> runtime.get_engine(session["sessionId"]).set_phone("0501234567")
    >>> runtime.submit(session["sessionId"])["values"]["phone"]
    '0501234567'
"""

from datetime import datetime, timezone
import logging
import uuid
from typing import Any, Dict, Optional

from leadform.config import FormSettings
from leadform.engine import FormStateEngine
from leadform.events import EventEmitter, FormEvent
from leadform.state_machine import FormSessionStateMachine
from leadform.types import EventType, SessionState
from leadform.validation import ValidationEngine


logger = logging.getLogger(__name__)


class FormRuntime:
    """Owner of the live form sessions.

    All sessions share one settings object, one rule set and one event
    emitter. Each session gets its own FormStateEngine and lifecycle.

    Attributes:
        settings: Settings shared by every session
        emitter: Event emitter shared by every session
    """

    def __init__(
        self,
        settings: Optional[FormSettings] = None,
        emitter: Optional[EventEmitter] = None,
    ):
        self.settings = settings or FormSettings()
        self.emitter = emitter or EventEmitter()
        self._validation_engine = ValidationEngine(settings=self.settings)
        self._engines: Dict[str, FormStateEngine] = {}
        self._lifecycles: Dict[str, FormSessionStateMachine] = {}

    def open_session(self) -> Dict[str, Any]:
        """Start a new form session with every field at its default.

        Returns:
            Response with ok, sessionId, state and the initial values
        """
        session_id = f"form_{uuid.uuid4().hex[:16]}"
        engine = FormStateEngine(
            session_id=session_id,
            settings=self.settings,
            validation_engine=self._validation_engine,
            emitter=self.emitter,
        )
        lifecycle = FormSessionStateMachine(session_id=session_id)
        self._engines[session_id] = engine
        self._lifecycles[session_id] = lifecycle

        logger.info("Opened form session %s", session_id)
        self._emit(EventType.SESSION_OPENED, session_id, None)

        return {
            "ok": True,
            "sessionId": session_id,
            "state": lifecycle.state.value,
            "values": engine.state.to_dict(),
        }

    def get_engine(self, session_id: str) -> FormStateEngine:
        """Return the engine of a live session.

        Raises:
            ValueError: If the session is unknown or has ended
        """
        engine = self._engines.get(session_id)
        if engine is None:
            raise ValueError(f"Form session {session_id} not found")
        return engine

    def get_session(self, session_id: str) -> Dict[str, Any]:
        """Return the values, errors and lifecycle state of a live session.

        Raises:
            ValueError: If the session is unknown or has ended
        """
        engine = self.get_engine(session_id)
        return {
            "ok": True,
            "sessionId": session_id,
            "state": self._lifecycles[session_id].state.value,
            "values": engine.state.to_dict(),
            "errors": engine.errors.to_dict(),
        }

    def submit(self, session_id: str) -> Dict[str, Any]:
        """Submit a session and discard its records.

        Returns:
            Response with ok, sessionId, the final state and the submitted values

        Raises:
            ValueError: If the session is unknown or has ended
        """
        engine = self.get_engine(session_id)
        values = engine.submit()
        self._end(session_id, SessionState.SUBMITTED)
        return {
            "ok": True,
            "sessionId": session_id,
            "state": SessionState.SUBMITTED.value,
            "values": values,
        }

    def close(self, session_id: str) -> Dict[str, Any]:
        """Abandon a session (navigation away) and discard its records.

        Raises:
            ValueError: If the session is unknown or has ended
        """
        self.get_engine(session_id)
        self._end(session_id, SessionState.ABANDONED)
        return {
            "ok": True,
            "sessionId": session_id,
            "state": SessionState.ABANDONED.value,
        }

    def active_sessions(self) -> int:
        """Number of sessions currently open."""
        return len(self._engines)

    def _end(self, session_id: str, final_state: SessionState) -> None:
        self._lifecycles[session_id].transition_to(final_state)
        del self._engines[session_id]
        del self._lifecycles[session_id]
        logger.info("Form session %s ended (%s)", session_id, final_state.value)
        self._emit(EventType.SESSION_CLOSED, session_id, {"state": final_state.value})

    def _emit(self, event_type: EventType, session_id: str, payload: Optional[Dict[str, Any]]) -> None:
        self.emitter.emit(FormEvent(
            event_id=f"evt_{uuid.uuid4().hex[:16]}",
            type=event_type,
            session_id=session_id,
            ts=datetime.now(timezone.utc),
            payload=payload,
        ))


__all__ = [
    "FormRuntime",
]

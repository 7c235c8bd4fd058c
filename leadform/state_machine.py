"""State machines for the leadform intake form.

Two small machines live here:

- SingleSelect: a chip group where at most one option is active. Its states
  are {none, selected(v)} and it has a single transition, toggle(v).
- FormSessionStateMachine: the lifecycle of one form session. A session is
  active until it is submitted or abandoned (navigation away), both of which
  are terminal.

Usage:
    >>> from leadform.types import Rooms
    >>> rooms = SingleSelect(Rooms)
    >>> rooms.toggle(3)
    <Rooms.THREE: 3>
    >>> rooms.toggle(3) is None
    True
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Iterator, Optional, Set, Tuple, Type, TypeVar

from leadform.types import SessionState


E = TypeVar("E", bound=Enum)


class InvalidStateTransitionError(Exception):
    """Raised when attempting an invalid session state transition.

    Attributes:
        current_state: The current state before the attempted transition
        target_state: The target state that was attempted
        message: Human-readable error message
    """

    def __init__(self, current_state: SessionState, target_state: SessionState, message: str):
        self.current_state = current_state
        self.target_state = target_state
        super().__init__(message)


class SingleSelect(Generic[E]):
    """Single-select-with-deselect group backed by an enum.

    Toggling the selected option clears the group; toggling any other option
    selects it and replaces the previous selection.

    Attributes:
        options: The enum class listing the options, in display order
        value: The selected option, or None

    Examples:
        >>> from leadform.types import SquareMeters
        >>> group = SingleSelect(SquareMeters)
        >>> group.toggle(90)
        <SquareMeters.SQM_90: 90>
        >>> group.toggle(150)
        <SquareMeters.SQM_150: 150>
        >>> group.is_selected(90)
        False
    """

    def __init__(self, options: Type[E], value: Optional[Any] = None):
        self.options = options
        self.value: Optional[E] = None if value is None else self._lookup(value)

    def toggle(self, option: Any) -> Optional[E]:
        """Apply one click on a chip and return the new selection.

        Raises:
            ValueError: If option is not one of the group's options
        """
        option = self._lookup(option)
        self.value = None if self.value == option else option
        return self.value

    def is_selected(self, option: Any) -> bool:
        """True if option is the active chip of the group."""
        return self.value is not None and self.value == self._lookup(option)

    def _lookup(self, option: Any) -> E:
        # bool is an int subclass; True would resolve to the option 1
        if isinstance(option, bool):
            raise ValueError(f"{option!r} is not a valid {self.options.__name__}")
        return self.options(option)

    def clear(self) -> None:
        """Return the group to the none state."""
        self.value = None

    def __iter__(self) -> Iterator[Tuple[E, bool]]:
        """Yield (option, selected) pairs in display order."""
        for option in self.options:
            yield option, option == self.value

    def __repr__(self) -> str:
        return f"SingleSelect({self.options.__name__}, value={self.value!r})"


# Valid session transitions; submitted and abandoned are terminal
VALID_TRANSITIONS: Dict[SessionState, Set[SessionState]] = {
    SessionState.ACTIVE: {
        SessionState.SUBMITTED,
        SessionState.ABANDONED,
    },
    SessionState.SUBMITTED: set(),
    SessionState.ABANDONED: set(),
}


@dataclass
class FormSessionStateMachine:
    """Lifecycle of a single form session.

    Attributes:
        session_id: Unique identifier for this session
        state: Current lifecycle state

    Examples:
        >>> sm = FormSessionStateMachine(session_id="form_123")
        >>> sm.state
        <SessionState.ACTIVE: 'active'>
        >>> sm.transition_to(SessionState.SUBMITTED)
        >>> sm.is_terminal()
        True
    """

    session_id: str
    state: SessionState = SessionState.ACTIVE

    def can_transition_to(self, target_state: SessionState) -> bool:
        """Check if transition to target state is valid."""
        return target_state in VALID_TRANSITIONS.get(self.state, set())

    def transition_to(self, target_state: SessionState) -> None:
        """Move the session to target_state.

        Raises:
            InvalidStateTransitionError: If the transition is not allowed
        """
        if not self.can_transition_to(target_state):
            raise InvalidStateTransitionError(
                current_state=self.state,
                target_state=target_state,
                message=(
                    f"Invalid state transition: cannot transition from "
                    f"'{self.state.value}' to '{target_state.value}'. "
                    f"Valid transitions from '{self.state.value}' are: "
                    f"{', '.join(sorted(s.value for s in VALID_TRANSITIONS[self.state]))}"
                    if VALID_TRANSITIONS[self.state]
                    else f"Invalid state transition: '{self.state.value}' is a terminal state, "
                    f"no transitions are allowed."
                ),
            )
        self.state = target_state

    def is_terminal(self) -> bool:
        """Check if the session has ended."""
        return len(VALID_TRANSITIONS[self.state]) == 0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the state machine to a dictionary.

        Examples:
            >>> FormSessionStateMachine(session_id="form_1").to_dict()
            {'sessionId': 'form_1', 'state': 'active'}
        """
        return {
            "sessionId": self.session_id,
            "state": self.state.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FormSessionStateMachine":
        """Deserialize a state machine from a dictionary."""
        state = data["state"]
        if isinstance(state, str):
            state = SessionState(state)
        return cls(session_id=data["sessionId"], state=state)


__all__ = [
    "SingleSelect",
    "FormSessionStateMachine",
    "InvalidStateTransitionError",
    "VALID_TRANSITIONS",
]

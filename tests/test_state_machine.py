"""Unit tests for the single-select groups and the session state machine.

Tests cover:
- SingleSelect toggle semantics (select, deselect, replace)
- SingleSelect option checking and iteration
- Session lifecycle transitions (valid and invalid)
- Terminal state detection
- Session state machine serialization
"""

import pytest

from leadform.state_machine import (
    FormSessionStateMachine,
    InvalidStateTransitionError,
    SingleSelect,
    VALID_TRANSITIONS,
)
from leadform.types import Purpose, Rooms, SessionState, SquareMeters


class TestSingleSelectToggle:
    """Test the toggle(v) transition."""

    def test_starts_with_nothing_selected(self):
        """A new group should have no selection."""
        group = SingleSelect(Rooms)

        assert group.value is None
        assert not any(selected for _, selected in group)

    def test_toggle_selects_option(self):
        """Toggling an unselected option should select it."""
        group = SingleSelect(Rooms)

        assert group.toggle(3) == Rooms.THREE
        assert group.value == Rooms.THREE

    def test_toggle_same_option_twice_clears(self):
        """Toggling the selected option should return to none."""
        group = SingleSelect(SquareMeters)
        group.toggle(90)

        assert group.toggle(90) is None
        assert group.value is None

    def test_toggle_other_option_replaces(self):
        """Toggling a different option should replace the selection."""
        group = SingleSelect(SquareMeters)
        group.toggle(90)
        group.toggle(150)

        assert group.value == SquareMeters.SQM_150
        assert group.is_selected(150) is True
        assert group.is_selected(90) is False

    @pytest.mark.parametrize("options", [SquareMeters, Rooms])
    def test_at_most_one_option_selected(self, options):
        """No sequence of toggles should leave more than one option selected."""
        group = SingleSelect(options)

        for option in list(options) + list(reversed(list(options))) + [list(options)[0]]:
            group.toggle(option)
            assert sum(1 for _, selected in group if selected) <= 1

    def test_toggle_accepts_enum_members(self):
        """Should accept members as well as raw values."""
        group = SingleSelect(Rooms)
        group.toggle(Rooms.SIX)

        assert group.is_selected(6) is True

    def test_toggle_unknown_option_raises(self):
        """Should reject values outside the option enum."""
        group = SingleSelect(Rooms)

        with pytest.raises(ValueError):
            group.toggle(7)
        assert group.value is None

    @pytest.mark.parametrize("flag", [True, False])
    def test_toggle_rejects_booleans(self, flag):
        """Should not read True or False as the options 1 or 0."""
        group = SingleSelect(Rooms)

        with pytest.raises(ValueError):
            group.toggle(flag)
        with pytest.raises(ValueError):
            group.is_selected(flag)
        assert group.value is None

    def test_initial_value_is_coerced(self):
        """Should coerce an initial raw value to its enum member."""
        group = SingleSelect(SquareMeters, 88)

        assert group.value is SquareMeters.SQM_88

    def test_clear(self):
        """clear() should return the group to none."""
        group = SingleSelect(Purpose, Purpose.INVESTMENT)
        group.clear()

        assert group.value is None


class TestSingleSelectIteration:
    """Test iteration and rendering helpers."""

    def test_iterates_in_display_order(self):
        """Should yield options in their declared order."""
        group = SingleSelect(SquareMeters)

        assert [int(option) for option, _ in group] == [90, 88, 150, 200]

    def test_iteration_flags_selected_option(self):
        """Should flag only the selected option."""
        group = SingleSelect(Rooms, 4)

        assert [selected for _, selected in group] == [False, False, False, True, False, False]

    def test_repr(self):
        """Should show the option enum and the value."""
        assert repr(SingleSelect(Rooms)) == "SingleSelect(Rooms, value=None)"


class TestSessionTransitions:
    """Test the session lifecycle."""

    def test_starts_active(self):
        """A new session should be active."""
        sm = FormSessionStateMachine(session_id="form_001")

        assert sm.state == SessionState.ACTIVE
        assert sm.is_terminal() is False

    @pytest.mark.parametrize("final_state", [SessionState.SUBMITTED, SessionState.ABANDONED])
    def test_active_can_end(self, final_state):
        """Should allow active -> submitted and active -> abandoned."""
        sm = FormSessionStateMachine(session_id="form_002")

        assert sm.can_transition_to(final_state) is True
        sm.transition_to(final_state)
        assert sm.state == final_state
        assert sm.is_terminal() is True

    def test_cannot_transition_to_active(self):
        """Should reject active -> active."""
        sm = FormSessionStateMachine(session_id="form_003")

        with pytest.raises(InvalidStateTransitionError) as exc_info:
            sm.transition_to(SessionState.ACTIVE)

        assert exc_info.value.current_state == SessionState.ACTIVE
        assert exc_info.value.target_state == SessionState.ACTIVE
        assert "cannot transition from 'active' to 'active'" in str(exc_info.value)

    @pytest.mark.parametrize("terminal", [SessionState.SUBMITTED, SessionState.ABANDONED])
    def test_terminal_states_allow_nothing(self, terminal):
        """Should reject every transition out of a terminal state."""
        sm = FormSessionStateMachine(session_id="form_004", state=terminal)

        for state in SessionState:
            assert sm.can_transition_to(state) is False

        with pytest.raises(InvalidStateTransitionError) as exc_info:
            sm.transition_to(SessionState.SUBMITTED)
        assert "terminal state" in str(exc_info.value)
        assert sm.state == terminal

    def test_transition_table_covers_every_state(self):
        """Every state should have an entry in VALID_TRANSITIONS."""
        assert set(VALID_TRANSITIONS) == set(SessionState)


class TestSessionSerialization:
    """Test session state machine serialization."""

    def test_to_dict(self):
        """Should serialize with camelCase keys."""
        sm = FormSessionStateMachine(session_id="form_010", state=SessionState.SUBMITTED)

        assert sm.to_dict() == {"sessionId": "form_010", "state": "submitted"}

    def test_from_dict(self):
        """Should deserialize from dict."""
        sm = FormSessionStateMachine.from_dict({"sessionId": "form_011", "state": "abandoned"})

        assert sm.session_id == "form_011"
        assert sm.state == SessionState.ABANDONED
        assert sm.is_terminal() is True

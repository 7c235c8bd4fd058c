"""Core type definitions for the leadform intake engine.

This module defines the fundamental types used throughout the leadform package:
- FormField: Named slots of the apartment search form
- SquareMeters / Rooms: Fixed chip options for the single-select groups
- Purpose: What the apartment is wanted for
- FieldErrorCode: The two user-facing error kinds
- FieldStatus: Per-field validation state (valid / invalid)
- SessionState: Lifecycle states of a form session
- EventType: Event types emitted to the rendering collaborator
"""

from enum import Enum, IntEnum
from typing import FrozenSet


class FormField(str, Enum):
    """Named slots of the form state record.

    Values are the camelCase keys used when the record is serialized.
    """
    LOCATION = "location"
    SQUARE_METERS = "squareMeters"
    ROOMS = "rooms"
    BUDGET_MIN = "budgetMin"
    BUDGET_MAX = "budgetMax"
    PURPOSE = "purpose"
    PREFERENCES = "preferences"
    DEALBREAKERS = "dealbreakers"
    EMAIL = "email"
    PHONE = "phone"


# Free-text fields sharing the letters-only rule
LETTERS_ONLY_FIELDS: FrozenSet[FormField] = frozenset({
    FormField.LOCATION,
    FormField.PREFERENCES,
    FormField.DEALBREAKERS,
})

# Fields that own a slot in the error record
VALIDATED_FIELDS: FrozenSet[FormField] = LETTERS_ONLY_FIELDS | {
    FormField.EMAIL,
    FormField.PHONE,
}


class SquareMeters(IntEnum):
    """Square meter chip options, in display order."""
    SQM_90 = 90
    SQM_88 = 88
    SQM_150 = 150
    SQM_200 = 200


class Rooms(IntEnum):
    """Room count chip options, in display order."""
    ONE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6


class Purpose(str, Enum):
    """Purpose of the apartment search. The first member is the default."""
    RESIDENCE = "מגורים"
    INVESTMENT = "השקעה"
    RENTAL = "השכרה"


class FieldErrorCode(str, Enum):
    """User-facing validation error kinds.

    FORMAT covers the character-class gates (letters-only fields, phone).
    SHAPE covers the email address shape check.
    """
    FORMAT = "format"
    SHAPE = "shape"


class FieldStatus(str, Enum):
    """Validation state of a single validated field."""
    VALID = "valid"
    INVALID = "invalid"


class SessionState(str, Enum):
    """Form session lifecycle states.

    Terminal states: submitted, abandoned.
    """
    ACTIVE = "active"
    SUBMITTED = "submitted"
    ABANDONED = "abandoned"


class EventType(str, Enum):
    """Event types emitted by the engine and the runtime."""
    SESSION_OPENED = "session.opened"
    FIELD_UPDATED = "field.updated"
    VALIDATION_FAILED = "validation.failed"
    SELECTION_CHANGED = "selection.changed"
    FORM_SUBMITTED = "form.submitted"
    CTA_TRIGGERED = "cta.triggered"
    SESSION_CLOSED = "session.closed"


__all__ = [
    "FormField",
    "LETTERS_ONLY_FIELDS",
    "VALIDATED_FIELDS",
    "SquareMeters",
    "Rooms",
    "Purpose",
    "FieldErrorCode",
    "FieldStatus",
    "SessionState",
    "EventType",
]

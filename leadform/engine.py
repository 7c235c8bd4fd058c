"""Form state and validation engine for the apartment search intake form.

FormStateEngine owns two parallel records for one form session:
- FormState: the current value of every field
- FormErrors: the current error message of every validated field

Every mutation validates its input, then updates the value and the error slot
of the field together before any listener is notified. Inputs are validated
in full on every call; there is no incremental state between keystrokes.

Usage:
    >>> engine = FormStateEngine()
    >>> engine.set_text("preferences", "123")
    >>> engine.state.preferences
    ''
    >>> engine.error("preferences")
    'ניתן להזין אותיות בלבד'
    >>> engine.toggle_rooms(3)
    >>> engine.is_selected("rooms", 3)
    True
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union
from datetime import datetime, timezone
import logging
import uuid

from leadform.config import FormSettings
from leadform.errors import FormErrors, UnknownFieldError
from leadform.events import EventEmitter, FormEvent
from leadform.formatting import budget_range_label, chip_label, format_currency
from leadform.state_machine import SingleSelect
from leadform.types import (
    EventType,
    FieldStatus,
    FormField,
    LETTERS_ONLY_FIELDS,
    Purpose,
    Rooms,
    SquareMeters,
)
from leadform.validation import ValidationEngine


logger = logging.getLogger(__name__)


# FormField -> FormState attribute
FIELD_ATTRIBUTES: Dict[FormField, str] = {
    FormField.LOCATION: "location",
    FormField.SQUARE_METERS: "square_meters",
    FormField.ROOMS: "rooms",
    FormField.BUDGET_MIN: "budget_min",
    FormField.BUDGET_MAX: "budget_max",
    FormField.PURPOSE: "purpose",
    FormField.PREFERENCES: "preferences",
    FormField.DEALBREAKERS: "dealbreakers",
    FormField.EMAIL: "email",
    FormField.PHONE: "phone",
}

# Fields whose options are rendered with an active/inactive flag
SELECTABLE_FIELDS = {
    FormField.SQUARE_METERS: SquareMeters,
    FormField.ROOMS: Rooms,
    FormField.PURPOSE: Purpose,
}

ChipView = Tuple[Any, str, bool]


@dataclass
class FormState:
    """Current values of the apartment search form.

    Attributes:
        location: Area and city, letters only
        square_meters: Selected size chip, or None
        rooms: Selected room count chip, or None
        budget_min: Fixed lower bound of the budget
        budget_max: Upper bound of the budget, driven by the slider
        purpose: What the apartment is for
        preferences: Free-text wishes, letters only
        dealbreakers: Free-text must-haves, letters only
        email: Contact email, stored even when malformed
        phone: Contact phone, digits only
    """
    location: str = ""
    square_meters: Optional[SquareMeters] = None
    rooms: Optional[Rooms] = None
    budget_min: int = 200000
    budget_max: int = 5000000
    purpose: Purpose = Purpose.RESIDENCE
    preferences: str = ""
    dealbreakers: str = ""
    email: str = ""
    phone: str = ""

    @classmethod
    def initial(cls, settings: Optional[FormSettings] = None) -> "FormState":
        """Create the record a new session starts with."""
        settings = settings or FormSettings()
        return cls(
            budget_min=settings.budget_min,
            budget_max=settings.default_budget_max,
            purpose=settings.default_purpose,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict with camelCase keys and raw enum values."""
        return {
            "location": self.location,
            "squareMeters": int(self.square_meters) if self.square_meters is not None else None,
            "rooms": int(self.rooms) if self.rooms is not None else None,
            "budgetMin": self.budget_min,
            "budgetMax": self.budget_max,
            "purpose": self.purpose.value,
            "preferences": self.preferences,
            "dealbreakers": self.dealbreakers,
            "email": self.email,
            "phone": self.phone,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], settings: Optional[FormSettings] = None) -> "FormState":
        """Create FormState from dict.

        Missing keys take the values a new session starts with under settings.
        """
        defaults = cls.initial(settings)
        square_meters = data.get("squareMeters")
        rooms = data.get("rooms")
        return cls(
            location=data.get("location", defaults.location),
            square_meters=SquareMeters(square_meters) if square_meters is not None else None,
            rooms=Rooms(rooms) if rooms is not None else None,
            budget_min=data.get("budgetMin", defaults.budget_min),
            budget_max=data.get("budgetMax", defaults.budget_max),
            purpose=Purpose(data.get("purpose", defaults.purpose.value)),
            preferences=data.get("preferences", defaults.preferences),
            dealbreakers=data.get("dealbreakers", defaults.dealbreakers),
            email=data.get("email", defaults.email),
            phone=data.get("phone", defaults.phone),
        )


def _as_field(value: Union[FormField, str], operation: str) -> FormField:
    try:
        return FormField(value)
    except ValueError:
        raise UnknownFieldError(value, operation, f"Unknown form field '{value}'") from None


class FormStateEngine:
    """State and validation engine for one apartment search form session.

    Attributes:
        session_id: Identifier used on emitted events
        settings: Slider domain, defaults and message text set
        state: Current field values
        errors: Current error messages of the validated fields
        emitter: Event emitter the rendering collaborator subscribes to

    Examples:
        >>> engine = FormStateEngine()
        >>> engine.set_email("notanemail")
        >>> engine.state.email, engine.has_error("email")
        ('notanemail', True)
        >>> engine.set_budget_max(3000000)
        >>> engine.budget_label
        '$ 3,000,000 - $ 200,000'
    """

    format_currency = staticmethod(format_currency)

    def __init__(
        self,
        session_id: Optional[str] = None,
        settings: Optional[FormSettings] = None,
        validation_engine: Optional[ValidationEngine] = None,
        emitter: Optional[EventEmitter] = None,
    ):
        """Start a session with every field at its default.

        Args:
            session_id: Optional identifier; generated when omitted
            settings: Optional FormSettings; defaults when omitted
            validation_engine: Optional rule set; built from settings when omitted
            emitter: Optional shared EventEmitter
        """
        self.session_id = session_id or f"form_{uuid.uuid4().hex[:16]}"
        self.settings = settings or FormSettings()
        self._validation = validation_engine or ValidationEngine(settings=self.settings)
        self.emitter = emitter or EventEmitter()
        self.state = FormState.initial(self.settings)
        self.errors = FormErrors()

    # Mutations

    def set_text(self, field: Union[FormField, str], value: str) -> None:
        """Set one of the letters-only fields (location, preferences, dealbreakers).

        A value with anything other than Hebrew or ASCII letters, whitespace
        and , . ' " - is rejected: the field keeps its previous value and
        shows the letters-only message.

        Raises:
            UnknownFieldError: If field is not a letters-only field
        """
        form_field = _as_field(field, "set_text")
        if form_field not in LETTERS_ONLY_FIELDS:
            raise UnknownFieldError(
                field,
                "set_text",
                f"set_text only applies to "
                f"{', '.join(sorted(f.value for f in LETTERS_ONLY_FIELDS))}, got '{form_field.value}'",
            )
        self._apply(form_field, value)

    def set_phone(self, value: str) -> None:
        """Set the phone field. Non-digit input is rejected and flagged."""
        self._apply(FormField.PHONE, value)

    def set_email(self, value: str) -> None:
        """Set the email field. The input is always stored; a malformed one is flagged."""
        self._apply(FormField.EMAIL, value)

    def toggle_square_meters(self, value: Union[SquareMeters, int]) -> None:
        """Click a square meter chip.

        Raises:
            ValueError: If value is not one of the square meter options
        """
        group = SingleSelect(SquareMeters, self.state.square_meters)
        self.state.square_meters = group.toggle(value)
        self._selection_changed(FormField.SQUARE_METERS, self.state.square_meters)

    def toggle_rooms(self, value: Union[Rooms, int]) -> None:
        """Click a room count chip.

        Raises:
            ValueError: If value is not one of the room options
        """
        group = SingleSelect(Rooms, self.state.rooms)
        self.state.rooms = group.toggle(value)
        self._selection_changed(FormField.ROOMS, self.state.rooms)

    def set_budget_max(self, value: int) -> None:
        """Move the budget slider.

        The value is stored as given. Keeping it inside the slider domain is
        the slider control's job.
        """
        self.state.budget_max = value
        self._emit(EventType.FIELD_UPDATED, FormField.BUDGET_MAX, {"value": value})

    def set_purpose(self, value: Union[Purpose, str]) -> None:
        """Pick the purpose.

        Raises:
            ValueError: If value is not one of the purposes
        """
        self.state.purpose = Purpose(value)
        self._selection_changed(FormField.PURPOSE, self.state.purpose)

    def submit(self) -> Dict[str, Any]:
        """Submit the form.

        There is no validation gate and no transport here. The current values
        are handed to listeners of the form.submitted event and returned.
        """
        values = self.state.to_dict()
        logger.info(
            "Form %s submitted (%d field error(s) outstanding)",
            self.session_id,
            len(self.errors.to_dict()),
        )
        self._emit(EventType.FORM_SUBMITTED, None, {"values": dict(values)})
        return values

    def trigger_call_to_action(self) -> None:
        """Forward a click on the secondary call-to-action. Form state is untouched."""
        self._emit(EventType.CTA_TRIGGERED, None, None)

    # Read access

    def value(self, field: Union[FormField, str]) -> Any:
        """Current value of a field."""
        return getattr(self.state, FIELD_ATTRIBUTES[_as_field(field, "value")])

    def error(self, field: Union[FormField, str]) -> Optional[str]:
        """Current error message of a validated field, or None."""
        return self.errors.get(field)

    def has_error(self, field: Union[FormField, str]) -> bool:
        """Styling flag: True while the field shows an error."""
        return self.error(field) is not None

    def field_status(self, field: Union[FormField, str]) -> FieldStatus:
        """VALID or INVALID, as last decided for a validated field."""
        return FieldStatus.INVALID if self.has_error(field) else FieldStatus.VALID

    def is_selected(self, field: Union[FormField, str], option: Any) -> bool:
        """True if option is the active choice of a chip group or of the purpose.

        Raises:
            UnknownFieldError: If field has no selectable options
            ValueError: If option is not one of the field's options
        """
        form_field = _as_field(field, "is_selected")
        options = SELECTABLE_FIELDS.get(form_field)
        if options is None:
            raise UnknownFieldError(
                field,
                "is_selected",
                f"Field '{form_field.value}' has no selectable options",
            )
        return SingleSelect(options, self.value(form_field)).is_selected(option)

    def square_meter_chips(self) -> List[ChipView]:
        """(option, label, selected) for every square meter chip, in display order."""
        return self._chips(SquareMeters, self.state.square_meters)

    def room_chips(self) -> List[ChipView]:
        """(option, label, selected) for every room chip, in display order."""
        return self._chips(Rooms, self.state.rooms)

    @property
    def budget_label(self) -> str:
        """Displayed budget range, e.g. "$ 5,000,000 - $ 200,000"."""
        return budget_range_label(self.state.budget_min, self.state.budget_max)

    def snapshot(self) -> Dict[str, Any]:
        """Values and errors of the session, for rendering."""
        return {
            "sessionId": self.session_id,
            "values": self.state.to_dict(),
            "errors": self.errors.to_dict(),
        }

    # Internals

    def _apply(self, form_field: FormField, value: str) -> None:
        result = self._validation.validate(form_field, value)

        if result.commit:
            setattr(self.state, FIELD_ATTRIBUTES[form_field], value)
        self.errors.set(form_field, result.error.message if result.error else None)

        if not result.is_valid:
            logger.debug(
                "Field %s: %s input of %d char(s) %s",
                form_field.value,
                result.error.code.value,
                len(value),
                "stored and flagged" if result.commit else "rejected",
            )
            self._emit(
                EventType.VALIDATION_FAILED,
                form_field,
                {"code": result.error.code.value, "message": result.error.message, "committed": result.commit},
            )
        if result.commit:
            self._emit(EventType.FIELD_UPDATED, form_field, {"value": value})

    def _selection_changed(self, form_field: FormField, selected: Any) -> None:
        raw = selected.value if selected is not None else None
        logger.debug("Field %s selection is now %r", form_field.value, raw)
        self._emit(EventType.SELECTION_CHANGED, form_field, {"value": raw})

    def _chips(self, options, selected) -> List[ChipView]:
        return [(option, chip_label(option), option == selected) for option in options]

    def _emit(
        self,
        event_type: EventType,
        form_field: Optional[FormField],
        payload: Optional[Dict[str, Any]],
    ) -> None:
        self.emitter.emit(FormEvent(
            event_id=f"evt_{uuid.uuid4().hex[:16]}",
            type=event_type,
            session_id=self.session_id,
            ts=datetime.now(timezone.utc),
            field=form_field.value if form_field is not None else None,
            payload=payload,
        ))


__all__ = [
    "FormState",
    "FormStateEngine",
    "FIELD_ATTRIBUTES",
]

"""Error types and the per-field error record for the leadform engine.

User input problems are never raised. They are described by a FieldError and
surface as a message in the FormErrors record, one slot per validated field,
next to the offending input.

Programming errors (asking the engine to do something a field does not
support) are raised as UnknownFieldError.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional, Union

from leadform.types import FieldErrorCode, FormField, VALIDATED_FIELDS


class UnknownFieldError(ValueError):
    """Raised when an operation is applied to a field it does not support.

    Attributes:
        field: The field that was passed in
        operation: Name of the operation that rejected it
    """

    def __init__(self, field: Any, operation: str, message: str):
        self.field = field
        self.operation = operation
        super().__init__(message)


@dataclass(frozen=True)
class FieldError:
    """Per-field validation error details.

    Attributes:
        path: Field key (e.g., "location", "email")
        code: Error kind (FORMAT or SHAPE)
        message: Human-readable message shown next to the field
        received: Optional - the rejected input

    Examples:
        >>> err = FieldError(
        ...     path="email",
        ...     code=FieldErrorCode.SHAPE,
        ...     message="כתובת אימייל לא תקינה",
        ...     received="notanemail"
        ... )
        >>> err.path
        'email'
    """
    path: str
    code: FieldErrorCode
    message: str
    received: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "path": self.path,
            "code": self.code.value if isinstance(self.code, FieldErrorCode) else self.code,
            "message": self.message,
        }
        if self.received is not None:
            result["received"] = self.received
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldError":
        """Create FieldError from dict."""
        code = data["code"]
        if isinstance(code, str):
            code = FieldErrorCode(code)
        return cls(
            path=data["path"],
            code=code,
            message=data["message"],
            received=data.get("received"),
        )


@dataclass
class FormErrors:
    """Error messages of the validated fields.

    A slot holds a message if and only if the last value attempted for that
    field failed validation.
    """
    location: Optional[str] = None
    preferences: Optional[str] = None
    dealbreakers: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    @staticmethod
    def _slot(field: Union[FormField, str]) -> str:
        try:
            form_field = FormField(field)
        except ValueError:
            form_field = None
        if form_field not in VALIDATED_FIELDS:
            raise UnknownFieldError(
                field,
                "errors",
                f"Field '{field}' has no error slot. Validated fields are: "
                f"{', '.join(sorted(f.value for f in VALIDATED_FIELDS))}",
            )
        return form_field.value

    def get(self, field: Union[FormField, str]) -> Optional[str]:
        """Return the message for a field, or None when it is valid."""
        return getattr(self, self._slot(field))

    def set(self, field: Union[FormField, str], message: Optional[str]) -> None:
        """Set or clear (message=None) the slot for a field."""
        setattr(self, self._slot(field), message)

    def any(self) -> bool:
        """True when at least one field currently carries an error."""
        return any(getattr(self, f.name) is not None for f in fields(self))

    def to_dict(self) -> Dict[str, str]:
        """Convert to dict, keeping only the slots that carry a message."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


__all__ = [
    "UnknownFieldError",
    "FieldError",
    "FormErrors",
]

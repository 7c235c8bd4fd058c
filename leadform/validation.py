"""Per-field validation engine for the leadform intake form.

Each validated field is bound to a FieldRule: a small JSON Schema string
constraint checked with jsonschema, the error code and message to report
when it fails, and the commit policy the engine applies to a failing value.

Two commit policies exist side by side:
- reject-and-revert (commit_on_invalid=False): a failing value is never
  stored, the field keeps its last valid value. Used by the letters-only
  fields and the phone field.
- commit-then-flag (commit_on_invalid=True): a failing value is stored and
  the error is shown alongside it. Used by the email field.

Patterns are anchored with \\Z rather than $ so a trailing newline is never
accepted.
"""

from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Dict, Mapping, Optional, Union

from jsonschema import Draft7Validator

from leadform.config import FormSettings
from leadform.errors import FieldError, UnknownFieldError
from leadform.types import FieldErrorCode, FormField


# Whitespace as ECMAScript \s defines it
WHITESPACE_CLASS = "\\t\\n\\v\\f\\r \\u00a0\\u1680\\u2000-\\u200a\\u2028\\u2029\\u202f\\u205f\\u3000\\ufeff"

LETTERS_ONLY_PATTERN = "^[a-zA-Z\u0590-\u05FF" + WHITESPACE_CLASS + ",.'\"-]*\\Z"
NUMBERS_ONLY_PATTERN = "^[0-9]*\\Z"
_NOT_SPACE_OR_AT = "[^" + WHITESPACE_CLASS + "@]+"
EMAIL_PATTERN = "^" + _NOT_SPACE_OR_AT + "@" + _NOT_SPACE_OR_AT + "\\." + _NOT_SPACE_OR_AT + "\\Z"


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating one input for one field.

    Attributes:
        is_valid: Whether the input passed the field's rule
        value: The input that was validated
        error: The FieldError describing the failure (None if valid)
        commit: Whether the engine should store the input

    Examples:
        >>> engine = ValidationEngine()
        >>> result = engine.validate(FormField.PHONE, "0501234567")
        >>> result.is_valid
        True
        >>> result.commit
        True
    """
    is_valid: bool
    value: str
    error: Optional[FieldError] = None
    commit: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "isValid": self.is_valid,
            "value": self.value,
            "commit": self.commit,
        }
        if self.error is not None:
            result["error"] = self.error.to_dict()
        return result


@dataclass(frozen=True)
class FieldRule:
    """Validation rule bound to a single field.

    Attributes:
        schema: JSON Schema the input must satisfy
        code: Error code reported on failure
        message: Error message reported on failure
        commit_on_invalid: Store failing input anyway (commit-then-flag)
        allow_empty: Empty input always passes, without consulting the schema
    """
    schema: Dict[str, Any]
    code: FieldErrorCode
    message: str
    commit_on_invalid: bool = False
    allow_empty: bool = True
    _validator: Draft7Validator = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        """Check the schema and build its validator once."""
        Draft7Validator.check_schema(self.schema)
        object.__setattr__(self, "_validator", Draft7Validator(self.schema))

    def check(self, value: str) -> bool:
        """Return True if value satisfies this rule."""
        if value == "" and self.allow_empty:
            return True
        return self._validator.is_valid(value)


def pattern_rule(
    pattern: str,
    code: FieldErrorCode,
    message: str,
    commit_on_invalid: bool = False,
) -> FieldRule:
    """Build a FieldRule for a regex-constrained string."""
    return FieldRule(
        schema={"type": "string", "pattern": pattern},
        code=code,
        message=message,
        commit_on_invalid=commit_on_invalid,
    )


def default_rules(settings: Optional[FormSettings] = None) -> Dict[FormField, FieldRule]:
    """Build the standard rule set for the apartment search form.

    Args:
        settings: Source of the error message text set (defaults if None)

    Returns:
        Mapping of every validated field to its rule
    """
    settings = settings or FormSettings()
    letters_only = pattern_rule(
        LETTERS_ONLY_PATTERN,
        FieldErrorCode.FORMAT,
        settings.letters_only_message,
    )
    return {
        FormField.LOCATION: letters_only,
        FormField.PREFERENCES: letters_only,
        FormField.DEALBREAKERS: letters_only,
        FormField.PHONE: pattern_rule(
            NUMBERS_ONLY_PATTERN,
            FieldErrorCode.FORMAT,
            settings.numbers_only_message,
        ),
        FormField.EMAIL: pattern_rule(
            EMAIL_PATTERN,
            FieldErrorCode.SHAPE,
            settings.invalid_email_message,
            commit_on_invalid=True,
        ),
    }


class ValidationEngine:
    """Validation engine mapping each validated field to its rule.

    Every call validates the complete input from scratch; nothing is carried
    over from previous inputs.

    Attributes:
        rules: Mapping of field to FieldRule

    Examples:
        >>> engine = ValidationEngine()
        >>> engine.validate(FormField.LOCATION, "ירושלים").is_valid
        True
        >>> result = engine.validate(FormField.LOCATION, "123")
        >>> result.is_valid, result.commit
        (False, False)
        >>> result = engine.validate(FormField.EMAIL, "notanemail")
        >>> result.is_valid, result.commit
        (False, True)
    """

    def __init__(
        self,
        rules: Optional[Mapping[FormField, FieldRule]] = None,
        settings: Optional[FormSettings] = None,
    ) -> None:
        """Initialize the validation engine.

        Args:
            rules: Field rules to use; defaults to default_rules(settings)
            settings: Message text set used when rules is not given
        """
        self.rules: Dict[FormField, FieldRule] = dict(
            rules if rules is not None else default_rules(settings)
        )

    def rule_for(self, field: Union[FormField, str]) -> FieldRule:
        """Return the rule bound to a field.

        Raises:
            UnknownFieldError: If the field has no rule
        """
        try:
            return self.rules[FormField(field)]
        except (KeyError, ValueError):
            raise UnknownFieldError(
                field,
                "validate",
                f"Field '{field}' has no validation rule. Validated fields are: "
                f"{', '.join(sorted(f.value for f in self.rules))}",
            ) from None

    def validate(self, field: Union[FormField, str], value: str) -> ValidationResult:
        """Validate one input for one field.

        Args:
            field: The field the input is meant for
            value: The complete new input

        Returns:
            ValidationResult with the verdict, the error (if any) and whether
            the value should be committed
        """
        rule = self.rule_for(field)

        if rule.check(value):
            return ValidationResult(is_valid=True, value=value, error=None, commit=True)

        return ValidationResult(
            is_valid=False,
            value=value,
            error=FieldError(
                path=FormField(field).value,
                code=rule.code,
                message=rule.message,
                received=value,
            ),
            commit=rule.commit_on_invalid,
        )

    def predicate(self, field: Union[FormField, str]) -> Callable[[str], ValidationResult]:
        """Return the validation function of a single field.

        Examples:
            >>> is_phone = ValidationEngine().predicate(FormField.PHONE)
            >>> is_phone("abc").is_valid
            False
        """
        self.rule_for(field)
        return partial(self.validate, FormField(field))


__all__ = [
    "ValidationEngine",
    "ValidationResult",
    "FieldRule",
    "pattern_rule",
    "default_rules",
    "LETTERS_ONLY_PATTERN",
    "NUMBERS_ONLY_PATTERN",
    "EMAIL_PATTERN",
]

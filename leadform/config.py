"""Configuration for the leadform intake engine.

FormSettings carries everything about the form that is fixed per deployment
rather than per session: the budget slider domain, the initial values, and
the error message text set shown next to invalid fields. Any setting can be
overridden from the environment with a LEADFORM_ prefix
(e.g. LEADFORM_BUDGET_STEP=100000).
"""

from typing import Any, Dict, Iterator

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from leadform.types import Purpose


LETTERS_ONLY_MESSAGE = "ניתן להזין אותיות בלבד"
NUMBERS_ONLY_MESSAGE = "ניתן להזין מספרים בלבד"
INVALID_EMAIL_MESSAGE = "כתובת אימייל לא תקינה"


class FormSettings(BaseSettings):
    """Deployment-level settings for the intake form.

    Attributes:
        budget_min: Fixed lower bound of the budget range
        budget_max_floor: Lowest position of the budget slider
        budget_max_ceiling: Highest position of the budget slider
        budget_step: Slider step
        default_budget_max: Initial slider position
        default_purpose: Initially selected purpose
        letters_only_message: Error shown for the letters-only fields
        numbers_only_message: Error shown for the phone field
        invalid_email_message: Error shown for a malformed email address

    Examples:
        >>> settings = FormSettings()
        >>> settings.budget_min
        200000
        >>> settings.default_purpose
        <Purpose.RESIDENCE: 'מגורים'>
    """

    model_config = SettingsConfigDict(env_prefix="LEADFORM_", frozen=True)

    budget_min: int = 200000
    budget_max_floor: int = 200000
    budget_max_ceiling: int = 5000000
    budget_step: int = 50000
    default_budget_max: int = 5000000
    default_purpose: Purpose = Purpose.RESIDENCE
    letters_only_message: str = LETTERS_ONLY_MESSAGE
    numbers_only_message: str = NUMBERS_ONLY_MESSAGE
    invalid_email_message: str = INVALID_EMAIL_MESSAGE

    @model_validator(mode="after")
    def _check_slider_domain(self) -> "FormSettings":
        if self.budget_step <= 0:
            raise ValueError(f"budget_step must be positive, got {self.budget_step}")
        if self.budget_max_floor > self.budget_max_ceiling:
            raise ValueError(
                f"budget_max_floor ({self.budget_max_floor}) exceeds "
                f"budget_max_ceiling ({self.budget_max_ceiling})"
            )
        if not self.budget_max_floor <= self.default_budget_max <= self.budget_max_ceiling:
            raise ValueError(
                f"default_budget_max ({self.default_budget_max}) is outside "
                f"[{self.budget_max_floor}, {self.budget_max_ceiling}]"
            )
        if (self.default_budget_max - self.budget_max_floor) % self.budget_step:
            raise ValueError(
                f"default_budget_max ({self.default_budget_max}) is not on the "
                f"budget_step ({self.budget_step}) grid from {self.budget_max_floor}"
            )
        if self.budget_min > self.budget_max_floor:
            raise ValueError(
                f"budget_min ({self.budget_min}) is above the lowest slider "
                f"position ({self.budget_max_floor})"
            )
        return self

    def slider_values(self) -> Iterator[int]:
        """Yield every valid budget slider position, lowest first."""
        return iter(range(self.budget_max_floor, self.budget_max_ceiling + 1, self.budget_step))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "budgetMin": self.budget_min,
            "budgetMaxFloor": self.budget_max_floor,
            "budgetMaxCeiling": self.budget_max_ceiling,
            "budgetStep": self.budget_step,
            "defaultBudgetMax": self.default_budget_max,
            "defaultPurpose": self.default_purpose.value,
            "lettersOnlyMessage": self.letters_only_message,
            "numbersOnlyMessage": self.numbers_only_message,
            "invalidEmailMessage": self.invalid_email_message,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FormSettings":
        """Create FormSettings from dict. Missing keys keep their defaults."""
        keys = {
            "budgetMin": "budget_min",
            "budgetMaxFloor": "budget_max_floor",
            "budgetMaxCeiling": "budget_max_ceiling",
            "budgetStep": "budget_step",
            "defaultBudgetMax": "default_budget_max",
            "defaultPurpose": "default_purpose",
            "lettersOnlyMessage": "letters_only_message",
            "numbersOnlyMessage": "numbers_only_message",
            "invalidEmailMessage": "invalid_email_message",
        }
        return cls(**{name: data[key] for key, name in keys.items() if key in data})


__all__ = [
    "FormSettings",
    "LETTERS_ONLY_MESSAGE",
    "NUMBERS_ONLY_MESSAGE",
    "INVALID_EMAIL_MESSAGE",
]

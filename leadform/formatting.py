"""Display helpers for the leadform engine.

Pure functions; none of them touch form state.
"""

from enum import Enum
from typing import Union


def format_currency(value: int) -> str:
    """Render an amount as dollars with US-style thousands separators.

    No rounding is applied; integer input is assumed.

    Examples:
        >>> format_currency(3000000)
        '$ 3,000,000'
        >>> format_currency(200000)
        '$ 200,000'
    """
    return f"$ {value:,}"


def budget_range_label(budget_min: int, budget_max: int) -> str:
    """Render the budget range shown above the slider.

    The form is laid out right to left, so the upper bound comes first.

    Examples:
        >>> budget_range_label(200000, 3000000)
        '$ 3,000,000 - $ 200,000'
    """
    return f"{format_currency(budget_max)} - {format_currency(budget_min)}"


def chip_label(option: Union[Enum, int]) -> str:
    """Render the text of a chip.

    The last option of a chip group stands for "this or more" and is
    prefixed with a plus sign.

    Examples:
        >>> from leadform.types import Rooms, SquareMeters
        >>> chip_label(Rooms.SIX)
        '+6'
        >>> chip_label(SquareMeters.SQM_88)
        '88'
    """
    if isinstance(option, Enum):
        last = list(type(option))[-1]
        if option is last:
            return f"+{option.value}"
        return str(option.value)
    return str(option)


__all__ = [
    "format_currency",
    "budget_range_label",
    "chip_label",
]

"""leadform: apartment search intake form engine.

leadform keeps the state of an apartment search lead form and validates it
field by field before submission:
- Letters-only free-text fields that reject invalid input and keep the last valid value
- A digits-only phone field with the same reject-and-revert policy
- An email field that stores any input and flags malformed addresses
- Single-select chip groups for size and room count
- A budget slider bound and a purpose selection

Rendering, styling and submission transport are left to the caller.

Basic usage:
    >>> from leadform.engine import FormStateEngine
    >>> engine = FormStateEngine()
    >>> engine.set_text("location", "תל אביב")
    >>> engine.state.location
    'תל אביב'
"""

__version__ = "0.1.0"
__author__ = "leadform Team"

# Version info
VERSION = (0, 1, 0)

# Core exports
from leadform.engine import FormState, FormStateEngine
from leadform.runtime import FormRuntime

# Package metadata
__all__ = [
    "__version__",
    "VERSION",
    "FormState",
    "FormStateEngine",
    "FormRuntime",
]

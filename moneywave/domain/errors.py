"""Domain errors raised by the MoneyWave engines."""

from typing import Any, Optional


class InvalidInputError(ValueError):
    """
    Raised when an input violates a documented precondition.

    Never raised for the importance clamp, which is a business rule.
    """

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.field = field
        self.value = value

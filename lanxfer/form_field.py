"""Text input fields that keep the last valid parsed value."""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class ValidationError(ValueError):
    """Raised by a validator when the raw text is not acceptable."""


class FormField(Generic[T]):
    """Holds raw input text, its last valid value and the current error."""

    def __init__(self, initial_value: T, validator: Callable[[str], T]) -> None:
        self.value = initial_value
        self.raw_value = str(initial_value)
        self.error: str | None = None
        self._validator = validator

    def on_input(self, raw: str) -> bool:
        """Record new input; return whether it was valid."""
        self.raw_value = raw
        try:
            value = self._validator(raw)
        except ValidationError as exc:
            self.error = str(exc)
            return False
        self.value = value
        self.error = None
        return True
"""Validation error definitions."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ValidationError:
    """Represents a validation error with a user-displayable message.

    Attributes:
        message: Human-readable description
        code: Stable identifier, usable as a localization key
    """

    message: str
    code: str


class InputValidationError(ValueError):
    """Raised when conflict check input is malformed and must be corrected."""

    def __init__(self, errors: list[ValidationError]):
        self.errors = list(errors)
        super().__init__("; ".join(self.messages))

    @property
    def messages(self) -> list[str]:
        return [e.message for e in self.errors]

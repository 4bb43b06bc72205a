"""Exceptions raised while reading and modifying KKIIDDZZ archives."""


class AemtError(Exception):
    """Base class for every error the package raises."""

    prefix = "Generic error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.prefix}: {self.message}"


class InvalidLengthError(AemtError):
    """Data does not have a length the archive can hold."""

    prefix = "Invalid Length"


class InvalidNumberError(AemtError, ValueError):
    """A textual number could not be parsed."""

    prefix = "Invalid Number"


class OutOfBoundsError(AemtError, IndexError):
    """An index points outside the available entries."""

    def __str__(self) -> str:
        return "Index out of bound"
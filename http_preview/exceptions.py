"""Package-specific exception types."""

from __future__ import annotations


class ExchangeError(ValueError):
    """Base class for invalid exchange data.

    Represents errors encountered while building an exchange from raw values.
    """


class InvalidHeaderError(ExchangeError):
    """Raised when a header value cannot be represented as a string.

    Args:
        name: Header name whose value was rejected.
        value: The rejected value.
    """

    def __init__(self, name: str, value: object):
        self.name = name
        self.value = value
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        return (
            f"Header {self.name!r} has an unsupported value of type "
            f"{type(self.value).__name__}"
        )


class ExchangeFileError(Exception):
    """Raised when reading or decoding an exchange file fails."""

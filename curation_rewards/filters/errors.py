"""Exceptions for filters module."""


class FilterError(Exception):
    """Base exception for filter handling errors."""

    pass


class DecodeError(FilterError):
    """
    Raised when a filter transport payload cannot be decoded.

    This can happen when:
    - Percent-encoding is malformed
    - Decoded text is not valid JSON

    Callers fall back to full defaults with applied=False.
    """

    pass

"""Errors raised by the check framework."""

from __future__ import annotations


class CheckError(Exception):
    """A check could not be evaluated.

    Raised with call-site context (``"listing Notebook resources: ..."``)
    and chained to the underlying cause.
    """


class DuplicateCheckError(ValueError):
    """Raised when two checks are registered under the same ID."""


class InvalidPatternError(ValueError):
    """Raised for a check selector pattern that cannot be used."""

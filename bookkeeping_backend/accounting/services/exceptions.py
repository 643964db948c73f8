# accounting/services/exceptions.py

"""
LEDGER SERVICE ERRORS

Centralized domain errors for the ledger & settlement engine.

Every mutating service either returns a success payload or raises exactly one
of these. Views turn them into a single human-readable string.

- LedgerValidationError : bad input, raised before any write
- NotFoundError         : referenced entity missing
- ConflictError         : amount bound violated (detected before mutation)
- ConsistencyError      : atomic unit failed mid-flight, fully rolled back
- StoreUnavailableError : transport / timeout / no atomic support (retryable)
"""

from __future__ import annotations


GENERIC_FAILURE_MESSAGE = "The operation could not be completed. Please try again."


class LedgerError(Exception):
    """Base exception for all ledger service failures."""

    http_status = 400
    retryable = False

    @property
    def public_message(self) -> str:
        return str(self)


class LedgerValidationError(LedgerError, ValueError):
    """Raised when input is malformed or out of range."""


class NotFoundError(LedgerError, LookupError):
    """Raised when a referenced record does not exist."""

    http_status = 404


class ConflictError(LedgerError):
    """Raised when an amount exceeds what the current state allows."""

    http_status = 409


class ConsistencyError(LedgerError):
    """Raised when an atomic unit fails after it started writing."""

    http_status = 500
    retryable = True

    @property
    def public_message(self) -> str:
        return GENERIC_FAILURE_MESSAGE


class StoreUnavailableError(LedgerError):
    """Raised when the database cannot be reached or cannot commit atomically."""

    http_status = 503
    retryable = True

    @property
    def public_message(self) -> str:
        return "The ledger store is temporarily unavailable. Please retry."


def from_django_validation(exc) -> LedgerValidationError:
    """Flatten a django.core.exceptions.ValidationError into one message."""
    messages = getattr(exc, "messages", None) or [str(exc)]
    return LedgerValidationError("; ".join(str(m) for m in messages))

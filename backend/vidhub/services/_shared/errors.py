"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never depend on Flask or HTTP.
They are the contract between repositories, adapters and services; each one
carries the client-safe message the account flows expose.

The translation to the JSON error envelope is handled by
``vidhub/core/errors.py`` via :func:`vidhub.services._shared.base.translate_exceptions`.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """
    Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL reports the constraint name; SQLite reports the offending
    ``table.column`` instead, so ``uq_users_email`` also matches ``users.email``.

    Parameters
    ----------
    exc : IntegrityError
        The exception raised by SQLAlchemy during flush/commit.
    constraint_name : str
        Name of the database constraint (e.g., ``'uq_users_email'``).

    Returns
    -------
    bool
        True if the IntegrityError matches the given constraint.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    name = constraint_name.lower()
    if name in message:
        return True
    if name.startswith("uq_"):
        table, _, column = name[3:].partition("_")
        return bool(column) and f"{table}.{column}" in message
    return False


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - ``message`` is always safe to show to clients.
    """

    default_message = "Service error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(ServiceError):
    """Raised when required input is missing, malformed or collides with existing data."""

    default_message = "Invalid input"


class AuthenticationError(ServiceError):
    """Raised when a credential or token is missing, invalid, expired or already used."""

    default_message = "Unauthorized request"


class NotFoundError(ServiceError):
    """Raised when a looked-up user or channel does not exist."""

    default_message = "Resource not found"


class DependencyError(ServiceError):
    """Raised when a downstream dependency (asset host, persistence) fails."""

    default_message = "Something went wrong"

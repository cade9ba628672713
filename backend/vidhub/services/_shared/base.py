# vidhub/services/_shared/base.py
from __future__ import annotations

from vidhub.core import errors as api_errors
from vidhub.services._shared.errors import (
    AuthenticationError,
    DependencyError,
    InvalidInputError,
    NotFoundError,
    ServiceError,
)
from vidhub.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


def translate_exceptions(exc: Exception) -> Exception:
    """
    Map service-level errors to API-level (HTTP) errors.

    :param exc: Exception raised within the service.
    :type exc: Exception
    :returns: Translated exception ready to be re-raised.
    :rtype: Exception
    """
    if isinstance(exc, InvalidInputError):
        return api_errors.BadRequest(exc.message)

    if isinstance(exc, AuthenticationError):
        return api_errors.Unauthorized(exc.message)

    if isinstance(exc, NotFoundError):
        return api_errors.NotFound(exc.message)

    if isinstance(exc, DependencyError):
        return api_errors.InternalError(exc.message)

    # Any other ServiceError subclass → 400 Bad Request
    if isinstance(exc, ServiceError):
        return api_errors.BadRequest(exc.message)

    # Fallback: return untouched (will bubble up to Flask handler)
    return exc


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    - Services must never touch the global session; always use a Unit of Work.
    - Normalization rules (lowercasing, password hashing) live in the models.
    """

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(self) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork()

    # --------------------------- Validation ---------------------------------

    @staticmethod
    def require_fields(message: str, *values: object) -> None:
        """
        Raise :class:`InvalidInputError` when any value is missing or blank.

        Strings are checked after trimming; ``None`` always counts as missing.

        :param message: Client-facing message used for the error.
        :param values: Values to check.
        :raises InvalidInputError: If a value is absent or blank.
        """
        for value in values:
            if value is None or (isinstance(value, str) and not value.strip()):
                raise InvalidInputError(message)

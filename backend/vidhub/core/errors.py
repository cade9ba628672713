"""Centralized JSON error envelope handling for the API."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify
from marshmallow import ValidationError
from sqlalchemy.exc import IntegrityError, OperationalError
from werkzeug.exceptions import HTTPException

from vidhub.core.logger import ensure_request_id

log = logging.getLogger(__name__)


def _as_envelope(
    *,
    status: int,
    message: str,
    errors: list[Any] | None = None,
) -> dict[str, Any]:
    """
    Build the error envelope shared by every non-2xx response.

    :param status: HTTP status code.
    :param message: Human-readable error summary (safe for clients).
    :param errors: Optional structured details (field errors, etc.).
    :returns: ``{statusCode, message, success, errors, requestId}`` dictionary.
    :rtype: dict
    """
    return {
        "statusCode": int(status),
        "message": message,
        "success": False,
        "errors": list(errors or []),
        "requestId": ensure_request_id(),
    }


def _envelope_response(envelope: dict[str, Any]) -> Response:
    resp = jsonify(envelope)
    resp.status_code = envelope["statusCode"]
    return resp


class APIError(Exception):
    """
    Represent a JSON-serializable API error.

    Parameters
    ----------
    message : str
        Human-readable description presented to clients.
    status_code : int, optional
        HTTP status code to return. Defaults to ``400``.
    errors : list[Any] | None, optional
        Optional structured payload (e.g., validation messages) included in the
        response body.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        errors: list[Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = int(status_code)
        self.errors = list(errors or [])

    def to_envelope(self) -> dict[str, Any]:
        """Serialize error metadata into the error envelope."""
        return _as_envelope(status=self.status_code, message=self.message, errors=self.errors)


class BadRequest(APIError):
    """400 when client input is invalid or missing."""

    def __init__(self, message: str = "Bad request", errors: list[Any] | None = None) -> None:
        super().__init__(message, status_code=HTTPStatus.BAD_REQUEST, errors=errors)


class Unauthorized(APIError):
    """401 when a credential or token is missing, invalid, expired or reused."""

    def __init__(self, message: str = "Unauthorized request") -> None:
        super().__init__(message, status_code=HTTPStatus.UNAUTHORIZED)


class NotFound(APIError):
    """404 when no matching record exists."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status_code=HTTPStatus.NOT_FOUND)


class InternalError(APIError):
    """500 when a downstream dependency (upload, persistence) fails."""

    def __init__(self, message: str = "Something went wrong") -> None:
        super().__init__(message, status_code=HTTPStatus.INTERNAL_SERVER_ERROR)


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Every handled error is rendered with the same envelope.
    - 5xx are logged with ``exc_info``; 4xx as warnings without traceback.
    """
    from vidhub.services._shared.base import translate_exceptions
    from vidhub.services._shared.errors import ServiceError

    @app.errorhandler(APIError)
    def handle_api_error(err: APIError):
        envelope = err.to_envelope()
        if err.status_code >= 500:
            log.error("APIError: status=%s msg=%s", err.status_code, err.message, exc_info=err)
        else:
            log.warning("APIError: status=%s msg=%s", err.status_code, err.message)
        return _envelope_response(envelope)

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        translated = translate_exceptions(err)
        if isinstance(translated, APIError):
            return handle_api_error(translated)
        return handle_unexpected_error(translated)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        message = (err.description or HTTPStatus(status).phrase).strip()
        if status == HTTPStatus.NOT_FOUND:
            message = "Route not found"
        level = log.error if status >= 500 else log.warning
        level("HTTPException: status=%s detail=%s", status, message)
        return _envelope_response(_as_envelope(status=status, message=message))

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        messages = err.messages if isinstance(err.messages, dict) else {"_schema": err.messages}
        envelope = _as_envelope(
            status=HTTPStatus.BAD_REQUEST,
            message="Validation failed",
            errors=[{"field": field, "messages": msgs} for field, msgs in messages.items()],
        )
        log.warning("ValidationError: fields=%s", sorted(messages))
        return _envelope_response(envelope)

    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        # Do not leak raw DB error to clients
        log.error("IntegrityError", exc_info=err)
        return _envelope_response(
            _as_envelope(status=HTTPStatus.CONFLICT, message="Resource conflict")
        )

    @app.errorhandler(OperationalError)
    def handle_operational_error(err: OperationalError):
        log.error("OperationalError", exc_info=err)
        return _envelope_response(
            _as_envelope(
                status=HTTPStatus.SERVICE_UNAVAILABLE,
                message="Service temporarily unavailable",
            )
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        # Unexpected server-side error; never leak internal details
        log.error("Unhandled exception", exc_info=err)
        return _envelope_response(
            _as_envelope(status=HTTPStatus.INTERNAL_SERVER_ERROR, message="Unexpected error")
        )

"""Service-to-HTTP error mapping and constraint detection."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from vidhub.core import errors as api_errors
from vidhub.services._shared.base import translate_exceptions
from vidhub.services._shared.errors import (
    AuthenticationError,
    DependencyError,
    InvalidInputError,
    NotFoundError,
    ServiceError,
    violates,
)


@pytest.mark.parametrize(
    "exc, expected_type, status",
    [
        (InvalidInputError("All fields are required"), api_errors.BadRequest, 400),
        (AuthenticationError("jwt expired"), api_errors.Unauthorized, 401),
        (NotFoundError("Channel does not exist"), api_errors.NotFound, 404),
        (DependencyError("Error while uploading avatar"), api_errors.InternalError, 500),
        (ServiceError("odd"), api_errors.BadRequest, 400),
    ],
)
def test_translate_exceptions(exc, expected_type, status):
    translated = translate_exceptions(exc)
    assert isinstance(translated, expected_type)
    assert translated.status_code == status
    assert translated.message == exc.message


def test_non_service_errors_pass_through():
    err = KeyError("x")
    assert translate_exceptions(err) is err


def test_service_error_default_message():
    assert AuthenticationError().message == "Unauthorized request"


def _integrity(message: str) -> IntegrityError:
    return IntegrityError("INSERT ...", {}, Exception(message))


def test_violates_matches_postgres_constraint_name():
    exc = _integrity('duplicate key value violates unique constraint "uq_users_email"')
    assert violates(exc, "uq_users_email")
    assert not violates(exc, "uq_users_username")


def test_violates_matches_sqlite_column_form():
    exc = _integrity("UNIQUE constraint failed: users.username")
    assert violates(exc, "uq_users_username")
    assert not violates(exc, "uq_users_email")


def test_envelope_shape(app):
    with app.app_context(), app.test_request_context(headers={"X-Request-ID": "req-1"}):
        envelope = api_errors.NotFound("User does not exist").to_envelope()
    assert envelope == {
        "statusCode": 404,
        "message": "User does not exist",
        "success": False,
        "errors": [],
        "requestId": "req-1",
    }

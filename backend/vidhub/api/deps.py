"""Shared API helpers: service wiring, authentication, envelopes and upload staging."""

from __future__ import annotations

import functools
import logging
import os
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, TypeVar
from uuid import uuid4

from flask import Response, current_app, g, jsonify, request
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from vidhub.core.errors import Unauthorized
from vidhub.core.extensions import get_asset_store
from vidhub.infra.jwt.token_provider import JWTTokenProvider
from vidhub.services._shared.errors import AuthenticationError, NotFoundError
from vidhub.services.profiles.service import ProfileService
from vidhub.services.sessions.service import SessionService
from vidhub.services.tokens.service import TokenService

F = TypeVar("F", bound=Callable[..., Any])

log = logging.getLogger(__name__)

# ------------------------------ Service wiring ------------------------------


def token_service() -> TokenService:
    return TokenService(token_provider=JWTTokenProvider())


def session_service() -> SessionService:
    return SessionService(token_service=token_service(), asset_store=get_asset_store())


def profile_service() -> ProfileService:
    return ProfileService(asset_store=get_asset_store())


# ------------------------------ Authentication ------------------------------


def _bearer_token() -> str | None:
    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def access_token_from_request() -> str | None:
    """Return the access token from the ``accessToken`` cookie or the Bearer header."""
    cookie_name = current_app.config.get("JWT_ACCESS_COOKIE_NAME", "accessToken")
    return request.cookies.get(cookie_name) or _bearer_token()


def require_auth(func: F) -> F:
    """Resolve the access token to a user and store it on ``g.current_user``.

    Responds 401 when the token is absent or invalid, or its user is gone.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = access_token_from_request()
        if not token:
            raise Unauthorized("Unauthorized request")
        try:
            claims = token_service().verify_access(token)
        except AuthenticationError as exc:
            raise Unauthorized(exc.message) from exc
        try:
            g.current_user = profile_service().get_user(int(claims["sub"]))
        except NotFoundError as exc:
            raise Unauthorized("Invalid access token") from exc
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


# -------------------------------- Responses ---------------------------------


def api_response(data: Any, message: str = "Success", *, status: int = 200) -> Response:
    """Return the success envelope ``{statusCode, data, message, success}``."""
    response = jsonify(
        {"statusCode": status, "data": data, "message": message, "success": status < 400}
    )
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request.endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


# ------------------------------ Upload staging ------------------------------


def _stage(upload: FileStorage | None, directory: Path) -> Path | None:
    if upload is None or not upload.filename:
        return None
    name = secure_filename(upload.filename) or "upload"
    target = directory / f"{uuid4().hex}-{name}"
    upload.save(target)
    return target


@contextmanager
def staged_uploads(*fields: str) -> Iterator[dict[str, Path | None]]:
    """Save the named multipart files to ``UPLOAD_TEMP_DIR`` for the block's duration.

    Yields ``{field: path or None}``. Every staged file is removed on exit,
    whether or not the asset store already consumed it.
    """
    directory = Path(current_app.config["UPLOAD_TEMP_DIR"])
    directory.mkdir(parents=True, exist_ok=True)
    staged: dict[str, Path | None] = {}
    try:
        for field in fields:
            staged[field] = _stage(request.files.get(field), directory)
        yield staged
    finally:
        for path in staged.values():
            if path is not None and path.exists():
                os.remove(path)
                log.debug("Removed staged upload %s", path.name)

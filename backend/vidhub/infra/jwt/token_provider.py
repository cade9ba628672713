# vidhub/infra/jwt/token_provider.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any, cast
from uuid import uuid4

import jwt as pyjwt
from flask import current_app
from flask_jwt_extended.exceptions import JWTExtendedException

from vidhub.services._shared.ports.token_provider import TokenDecodeError, TokenProvider

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


@dataclass(slots=True)
class JWTTokenProvider(TokenProvider):
    """
    Adapter issuing access tokens with Flask-JWT-Extended and refresh tokens with PyJWT.

    Flask-JWT-Extended signs every token kind with ``JWT_SECRET_KEY``; refresh
    tokens need their own key (``REFRESH_TOKEN_SECRET``), so they are encoded
    here directly.

    .. note::
       Requires an active Flask app context with proper JWT settings.
    """

    def create_access_token(
        self,
        *,
        identity: str | int,
        additional_claims: dict[str, Any] | None = None,
    ) -> str:
        from flask_jwt_extended import create_access_token as _create_access

        return cast(
            str,
            _create_access(identity=str(identity), additional_claims=additional_claims or {}),
        )

    def create_refresh_token(self, *, identity: str | int) -> str:
        cfg = current_app.config
        now = datetime.now(tz=UTC)
        expires = cast(timedelta, cfg["REFRESH_TOKEN_EXPIRES"])
        payload = {
            "sub": str(identity),
            "type": REFRESH_TOKEN_TYPE,
            # Random jti keeps two tokens minted in the same second distinct
            "jti": uuid4().hex,
            "iat": now,
            "exp": now + expires,
        }
        return pyjwt.encode(
            payload, cfg["REFRESH_TOKEN_SECRET"], algorithm=cfg.get("JWT_ALGORITHM", "HS256")
        )

    def decode_access(self, token: str) -> dict[str, Any]:
        from flask_jwt_extended import decode_token

        try:
            claims = cast(dict[str, Any], decode_token(token))
        except (pyjwt.PyJWTError, JWTExtendedException) as exc:
            raise TokenDecodeError(str(exc)) from exc
        if claims.get("type") != ACCESS_TOKEN_TYPE:
            raise TokenDecodeError("Only access tokens are allowed")
        return claims

    def decode_refresh(self, token: str) -> dict[str, Any]:
        cfg = current_app.config
        try:
            claims = pyjwt.decode(
                token,
                cfg["REFRESH_TOKEN_SECRET"],
                algorithms=[cfg.get("JWT_ALGORITHM", "HS256")],
                options={"require": ["exp", "sub"]},
            )
        except pyjwt.PyJWTError as exc:
            raise TokenDecodeError(str(exc)) from exc
        if claims.get("type") != REFRESH_TOKEN_TYPE:
            raise TokenDecodeError("Only refresh tokens are allowed")
        return cast(dict[str, Any], claims)

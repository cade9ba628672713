from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any, Protocol


class TokenDecodeError(Exception):
    """Raised by providers when a token is malformed, tampered with or expired.

    ``str(exc)`` is the decoder's own message and is surfaced to clients.
    """


class TokenProvider(Protocol):
    """Port for issuing and decoding the two kinds of JWT.

    Access and refresh tokens are signed with different secrets and carry
    different claims: access tokens hold ``sub`` plus ``username``,
    ``email`` and ``fullName``; refresh tokens hold ``sub`` only.
    """

    def create_access_token(
        self,
        *,
        identity: int | str,
        additional_claims: dict[str, Any] | None = None,
    ) -> str: ...

    def create_refresh_token(self, *, identity: int | str) -> str: ...

    def decode_access(self, token: str) -> dict[str, Any]: ...

    def decode_refresh(self, token: str) -> dict[str, Any]: ...


class StubTokenProvider(TokenProvider):
    """Deterministic token provider used in unit tests.

    Tokens are opaque strings; every issued token is unique. ``expire(token)``
    marks a token so decoding fails with ``"jwt expired"``.
    """

    def __init__(self) -> None:
        self._now = datetime.now(tz=UTC)
        self._seq = 0
        self._issued: dict[str, dict[str, Any]] = {}
        self._expired: set[str] = set()

    def _mk(
        self,
        *,
        identity: int | str,
        ttype: str,
        exp_delta: timedelta,
        additional_claims: dict[str, Any] | None = None,
    ) -> str:
        self._seq += 1
        token = f"{ttype}.{identity}.{self._seq}"
        payload: dict[str, Any] = {
            "sub": str(identity),
            "type": ttype,
            "jti": f"jti-{self._seq}",
            "exp": int((self._now + exp_delta).timestamp()),
        }
        if additional_claims:
            payload.update(additional_claims)
        self._issued[token] = payload
        return token

    def create_access_token(
        self,
        *,
        identity: int | str,
        additional_claims: dict[str, Any] | None = None,
    ) -> str:
        return self._mk(
            identity=identity,
            ttype="access",
            exp_delta=timedelta(days=1),
            additional_claims=additional_claims,
        )

    def create_refresh_token(self, *, identity: int | str) -> str:
        return self._mk(identity=identity, ttype="refresh", exp_delta=timedelta(days=10))

    def expire(self, token: str) -> None:
        self._expired.add(token)

    def _decode(self, token: str, ttype: str) -> dict[str, Any]:
        payload = self._issued.get(token)
        if payload is None or payload["type"] != ttype:
            raise TokenDecodeError("invalid signature")
        if token in self._expired:
            raise TokenDecodeError("jwt expired")
        return dict(payload)

    def decode_access(self, token: str) -> dict[str, Any]:
        return self._decode(token, "access")

    def decode_refresh(self, token: str) -> dict[str, Any]:
        return self._decode(token, "refresh")

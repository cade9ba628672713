# vidhub/services/tokens/service.py
from __future__ import annotations

import logging
from typing import Any, Protocol

from vidhub.services._shared.base import BaseService
from vidhub.services._shared.errors import AuthenticationError, DependencyError
from vidhub.services._shared.ports.token_provider import TokenDecodeError, TokenProvider
from vidhub.services.tokens.dto import TokenPairOut, TokenSubject

log = logging.getLogger(__name__)

PERSIST_FAILED = "Something went wrong while generating refresh and access token"


class _UserLike(Protocol):
    id: int
    username: str
    email: str
    full_name: str


def _coerce_user_id(subject: Any) -> int | None:
    try:
        return int(subject)
    except (TypeError, ValueError):
        return None


class TokenService(BaseService):
    """
    Access/refresh token lifecycle.

    Exactly one refresh token is valid per user: the value stored on the
    user row. Issuing and persisting a new one (login, refresh) invalidates
    the previous token; :meth:`revoke` invalidates it without replacement.

    Concurrent refreshes for the same user are not serialized; the last
    write wins.
    """

    def __init__(self, *, token_provider: TokenProvider) -> None:
        """
        :param token_provider: Adapter for issuing/decoding JWTs.
        """
        self.tokens = token_provider

    # ------------------------------------------------------------------ #
    # Issuance
    # ------------------------------------------------------------------ #

    def issue_pair(self, user: _UserLike) -> TokenPairOut:
        """
        Mint a new access/refresh pair for ``user`` without persisting anything.

        :param user: Object exposing ``id``, ``username``, ``email``, ``full_name``.
        :returns: Token pair.
        """
        subject = TokenSubject(
            id=int(user.id), username=user.username, email=user.email, full_name=user.full_name
        )
        access = self.tokens.create_access_token(
            identity=str(subject.id), additional_claims=subject.claims()
        )
        refresh = self.tokens.create_refresh_token(identity=str(subject.id))
        return TokenPairOut(access_token=access, refresh_token=refresh)

    def persist_refresh(self, user_id: int, refresh_token: str) -> None:
        """
        Store ``refresh_token`` as the single live refresh token of ``user_id``.

        Field-patch write: no model validation runs.

        :raises DependencyError: If the user row no longer exists.
        """
        with self.rw_uow() as uow:
            if not uow.users.patch_fields(user_id, refresh_token=refresh_token):
                log.error("Refresh token not persisted; user %s is gone", user_id)
                raise DependencyError(PERSIST_FAILED)

    def issue_and_persist(self, user: _UserLike) -> TokenPairOut:
        """Issue a pair for ``user`` and persist its refresh token."""
        pair = self.issue_pair(user)
        self.persist_refresh(int(user.id), pair.refresh_token)
        return pair

    # ------------------------------------------------------------------ #
    # Verification
    # ------------------------------------------------------------------ #

    def verify_refresh(self, token: str | None) -> int:
        """
        Validate a refresh token against its signature, expiry and the stored value.

        :param token: Encoded refresh JWT.
        :returns: Id of the token's user.
        :raises AuthenticationError: ``"Unauthorized request"`` when absent, the
            decoder message when the JWT is invalid, ``"Invalid refresh token"``
            when the user is gone, ``"Refresh token is expired or used"`` when a
            newer token has replaced it.
        """
        if not token or not token.strip():
            raise AuthenticationError("Unauthorized request")

        try:
            claims = self.tokens.decode_refresh(token)
        except TokenDecodeError as exc:
            log.warning("Refresh token rejected: %s", exc)
            raise AuthenticationError(str(exc) or "Invalid refresh token") from exc

        user_id = _coerce_user_id(claims.get("sub"))
        if user_id is None:
            raise AuthenticationError("Invalid refresh token")

        with self.ro_uow() as uow:
            found, stored = uow.users.get_refresh_token(user_id)

        if not found:
            raise AuthenticationError("Invalid refresh token")
        if stored is None or stored != token:
            log.warning("Stale refresh token presented for user %s", user_id)
            raise AuthenticationError("Refresh token is expired or used")
        return user_id

    def verify_access(self, token: str | None) -> dict[str, Any]:
        """
        Validate an access token (signature, expiry, type) and return its claims.

        :raises AuthenticationError: ``"Unauthorized request"`` when absent,
            otherwise the decoder message.
        """
        if not token or not token.strip():
            raise AuthenticationError("Unauthorized request")
        try:
            claims = self.tokens.decode_access(token)
        except TokenDecodeError as exc:
            raise AuthenticationError(str(exc) or "Invalid access token") from exc
        if _coerce_user_id(claims.get("sub")) is None:
            raise AuthenticationError("Invalid access token")
        return claims

    # ------------------------------------------------------------------ #
    # Revocation
    # ------------------------------------------------------------------ #

    def revoke(self, user_id: int) -> None:
        """Clear the stored refresh token of ``user_id`` (no-op when the user is gone)."""
        with self.rw_uow() as uow:
            uow.users.patch_fields(user_id, refresh_token=None)
        log.info("Refresh token revoked for user %s", user_id)

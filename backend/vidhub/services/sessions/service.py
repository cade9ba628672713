# vidhub/services/sessions/service.py
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from vidhub.models.user import User
from vidhub.services._shared.base import BaseService
from vidhub.services._shared.dto import UserPublicOut
from vidhub.services._shared.errors import (
    AuthenticationError,
    DependencyError,
    InvalidInputError,
    NotFoundError,
    violates,
)
from vidhub.services._shared.ports.asset_store import AssetStore
from vidhub.services.sessions.dto import (
    ChangePasswordIn,
    LoginIn,
    LoginOut,
    RefreshIn,
    RegisterIn,
)
from vidhub.services.tokens.dto import TokenPairOut, TokenSubject
from vidhub.services.tokens.service import TokenService

log = logging.getLogger(__name__)


class SessionService(BaseService):
    """
    Account lifecycle flows: register, login, logout, refresh, change password.

    Collaborators are injected: the :class:`TokenService` owns token issuance
    and rotation, the :class:`AssetStore` receives staged uploads.
    """

    def __init__(self, *, token_service: TokenService, asset_store: AssetStore) -> None:
        self.tokens = token_service
        self.assets = asset_store

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> UserPublicOut:
        """
        Create an account after uploading its avatar (and optional cover image).

        Checks run in a fixed order: required text fields, uniqueness of
        email/username, presence of the avatar file, avatar upload. A failed
        cover upload is tolerated and stored as ``""``.

        :param dto: Registration input with staged file paths.
        :returns: Public projection of the new user.
        :raises InvalidInputError: Missing fields, duplicate user or missing avatar.
        :raises DependencyError: Avatar upload or user creation failed.
        """
        self.require_fields(
            "All fields are required", dto.full_name, dto.email, dto.username, dto.password
        )

        with self.ro_uow() as uow:
            taken = uow.users.exists_by_email_or_username(
                email=str(dto.email), username=str(dto.username)
            )
        if taken:
            raise InvalidInputError("User already exists")

        if not dto.avatar_path:
            raise InvalidInputError("Avatar file is required")

        avatar = self.assets.upload(dto.avatar_path)
        if avatar is None:
            raise DependencyError("Error while uploading avatar")
        cover = self.assets.upload(dto.cover_image_path) if dto.cover_image_path else None
        if dto.cover_image_path and cover is None:
            log.warning("Cover image upload failed during registration; continuing without it")

        try:
            with self.rw_uow() as uow:
                user = User(
                    full_name=dto.full_name,
                    email=dto.email,
                    username=dto.username,
                    password=dto.password,
                    avatar=avatar.href,
                    cover_image=cover.href if cover else "",
                )
                uow.users.save(user)
                row = uow.users.get_public(user.id)
                if row is None:
                    raise DependencyError("Error while creating user")
                created = UserPublicOut.from_row(row)
        except ValueError as exc:
            raise InvalidInputError(str(exc)) from exc
        except IntegrityError as exc:
            if violates(exc, "uq_users_email") or violates(exc, "uq_users_username"):
                raise InvalidInputError("User already exists") from exc
            raise

        log.info("User registered", extra={"user_id": created.id})
        return created

    # ------------------------------------------------------------------ #
    # Login / logout
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> LoginOut:
        """
        Authenticate by username or email and issue a fresh, persisted token pair.

        :raises InvalidInputError: Neither username nor email given.
        :raises NotFoundError: No user matches the identifier.
        :raises AuthenticationError: Password mismatch.
        """
        if not (dto.username and dto.username.strip()) and not (dto.email and dto.email.strip()):
            raise InvalidInputError("username or email is required")

        with self.ro_uow() as uow:
            user = uow.users.find_by_identifier(username=dto.username, email=dto.email)
            if user is None:
                raise NotFoundError("User does not exist")
            if not user.verify_password(dto.password):
                log.warning("Login rejected: bad password", extra={"user_id": user.id})
                raise AuthenticationError("Invalid user credentials")
            subject = TokenSubject(
                id=user.id, username=user.username, email=user.email, full_name=user.full_name
            )
            row = uow.users.get_public(user.id)

        if row is None:
            raise NotFoundError("User does not exist")
        pair = self.tokens.issue_and_persist(subject)
        log.info("User logged in", extra={"user_id": subject.id})
        return LoginOut(
            user=UserPublicOut.from_row(row),
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
        )

    def logout(self, user_id: int) -> None:
        """Invalidate the stored refresh token of ``user_id``."""
        self.tokens.revoke(user_id)
        log.info("User logged out", extra={"user_id": user_id})

    # ------------------------------------------------------------------ #
    # Refresh
    # ------------------------------------------------------------------ #

    def refresh(self, dto: RefreshIn) -> TokenPairOut:
        """
        Exchange the live refresh token for a new pair (rotation-on-use).

        :raises AuthenticationError: Absent, invalid, expired or already-used token.
        """
        user_id = self.tokens.verify_refresh(dto.refresh_token)

        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise AuthenticationError("Invalid refresh token")
            subject = TokenSubject(
                id=user.id, username=user.username, email=user.email, full_name=user.full_name
            )

        return self.tokens.issue_and_persist(subject)

    # ------------------------------------------------------------------ #
    # Password
    # ------------------------------------------------------------------ #

    def change_password(self, dto: ChangePasswordIn) -> None:
        """
        Replace the password after checking the old one.

        :raises InvalidInputError: Missing fields or wrong old password.
        :raises NotFoundError: The user no longer exists.
        """
        self.require_fields(
            "Old password and new password are required", dto.old_password, dto.new_password
        )
        with self.rw_uow() as uow:
            user = uow.users.get(dto.user_id)
            if user is None:
                raise NotFoundError("User does not exist")
            if not user.verify_password(dto.old_password):
                raise InvalidInputError("Invalid old password")
            uow.users.update_password(user, str(dto.new_password))
        log.info("Password changed", extra={"user_id": dto.user_id})

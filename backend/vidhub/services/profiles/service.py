# vidhub/services/profiles/service.py
from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy.exc import IntegrityError

from vidhub.services._shared.base import BaseService
from vidhub.services._shared.dto import UserAccountOut, UserPublicOut
from vidhub.services._shared.errors import (
    DependencyError,
    InvalidInputError,
    NotFoundError,
)
from vidhub.services._shared.ports.asset_store import AssetStore, UploadResult
from vidhub.services.profiles.dto import ChannelProfileOut, UpdateAccountIn

log = logging.getLogger(__name__)


class ProfileService(BaseService):
    """
    Read and update the authenticated user's profile, and look up channels.
    """

    def __init__(self, *, asset_store: AssetStore) -> None:
        self.assets = asset_store

    def get_user(self, user_id: int) -> UserPublicOut:
        """
        Return the public projection of ``user_id``.

        :raises NotFoundError: If the user does not exist.
        """
        with self.ro_uow() as uow:
            row = uow.users.get_public(user_id)
        if row is None:
            raise NotFoundError("User does not exist")
        return UserPublicOut.from_row(row)

    def update_account(self, dto: UpdateAccountIn) -> UserAccountOut:
        """
        Update full name, username and (when given) email.

        The returned projection includes ``refresh_token``.

        :raises InvalidInputError: Missing fields, invalid values or a taken username/email.
        :raises NotFoundError: If the user does not exist.
        """
        self.require_fields("All fields are required", dto.full_name, dto.username)

        try:
            with self.rw_uow() as uow:
                user = uow.users.get(dto.user_id)
                if user is None:
                    raise NotFoundError("User does not exist")
                user.full_name = dto.full_name
                user.username = dto.username
                if dto.email and dto.email.strip():
                    user.email = dto.email
                uow.users.save(user)
                row = uow.users.get_account(user.id)
        except ValueError as exc:
            raise InvalidInputError(str(exc)) from exc
        except IntegrityError as exc:
            raise InvalidInputError("Username or email already taken") from exc

        if row is None:
            raise NotFoundError("User does not exist")
        return UserAccountOut.from_row(row)

    # ------------------------------------------------------------------ #
    # Media
    # ------------------------------------------------------------------ #

    def update_avatar(self, user_id: int, path: Path | None) -> UploadResult:
        """Upload a new avatar and store its URL; returns the upload result."""
        return self._replace_media(
            user_id,
            path,
            field="avatar",
            missing="Avatar file is missing",
            failed="Error while uploading avatar",
        )

    def update_cover_image(self, user_id: int, path: Path | None) -> UploadResult:
        """Upload a new cover image and store its URL; returns the upload result."""
        return self._replace_media(
            user_id,
            path,
            field="cover_image",
            missing="Cover image file is missing",
            failed="Error while uploading cover image",
        )

    def _replace_media(
        self, user_id: int, path: Path | None, *, field: str, missing: str, failed: str
    ) -> UploadResult:
        if not path:
            raise InvalidInputError(missing)
        result = self.assets.upload(path)
        if result is None:
            raise DependencyError(failed)
        with self.rw_uow() as uow:
            if not uow.users.patch_fields(user_id, **{field: result.href}):
                raise NotFoundError("User does not exist")
        log.info("Profile media replaced", extra={"user_id": user_id})
        return result

    # ------------------------------------------------------------------ #
    # Channel
    # ------------------------------------------------------------------ #

    def get_channel_profile(self, username: str | None, viewer_id: int | None) -> ChannelProfileOut:
        """
        Return the channel of ``username`` with subscriber aggregates.

        :param username: Channel handle (case-insensitive).
        :param viewer_id: Requesting user, used for ``is_subscribed``.
        :raises InvalidInputError: Blank username.
        :raises NotFoundError: No such channel.
        """
        if not username or not username.strip():
            raise InvalidInputError("username is missing")
        with self.ro_uow() as uow:
            row = uow.users.get_channel_profile(username, viewer_id)
        if row is None:
            raise NotFoundError("Channel does not exist")
        return ChannelProfileOut.from_row(row)

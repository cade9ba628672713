# vidhub/services/sessions/dto.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from vidhub.services._shared.dto import UserPublicOut

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for registration.

    :param full_name: Display name.
    :param email: Email address (normalized by the model).
    :param username: Handle (lowercased by the model).
    :param password: Raw password (hashed by the model).
    :param avatar_path: Staged avatar file; required.
    :param cover_image_path: Staged cover image file; optional.
    """

    full_name: str | None
    email: str | None
    username: str | None
    password: str | None
    avatar_path: Path | None = None
    cover_image_path: Path | None = None


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login. Either ``username`` or ``email`` identifies the user.
    """

    password: str | None
    username: str | None = None
    email: str | None = None


@dataclass(frozen=True, slots=True)
class RefreshIn:
    """
    Input DTO for token refresh.

    :param refresh_token: Encoded refresh JWT from the cookie or the body.
    :type refresh_token: str | None
    """

    refresh_token: str | None


@dataclass(frozen=True, slots=True)
class ChangePasswordIn:
    user_id: int
    old_password: str | None
    new_password: str | None


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class LoginOut:
    """
    Output DTO for a successful login.

    :param user: Client-safe user projection.
    :param access_token: Encoded access JWT.
    :param refresh_token: Encoded refresh JWT (also persisted on the user).
    """

    user: UserPublicOut
    access_token: str
    refresh_token: str

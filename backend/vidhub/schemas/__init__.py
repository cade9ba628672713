"""Convenience exports for application schemas."""

from __future__ import annotations

from .common import LenientInputSchema, optional_string
from .user import (
    AccountSchema,
    ChangePasswordSchema,
    ChannelProfileSchema,
    LoginResponseSchema,
    LoginSchema,
    RefreshTokenSchema,
    RegisterSchema,
    TokenPairSchema,
    UpdateAccountSchema,
    UserSchema,
)

__all__ = [
    "LenientInputSchema",
    "optional_string",
    "RegisterSchema",
    "LoginSchema",
    "RefreshTokenSchema",
    "ChangePasswordSchema",
    "UpdateAccountSchema",
    "UserSchema",
    "AccountSchema",
    "TokenPairSchema",
    "LoginResponseSchema",
    "ChannelProfileSchema",
]

"""User resource schemas (camelCase on the wire)."""

from __future__ import annotations

from marshmallow import Schema, fields

from .common import LenientInputSchema, optional_string

# ------------------------------- Requests -----------------------------------


class RegisterSchema(LenientInputSchema):
    """Text parts of the multipart registration form."""

    full_name = optional_string("fullName")
    email = optional_string()
    username = optional_string()
    password = optional_string()


class LoginSchema(LenientInputSchema):
    """Credentials: ``username`` or ``email`` plus ``password``."""

    username = optional_string()
    email = optional_string()
    password = optional_string()


class RefreshTokenSchema(LenientInputSchema):
    refresh_token = optional_string("refreshToken")


class ChangePasswordSchema(LenientInputSchema):
    old_password = optional_string("oldPassword")
    new_password = optional_string("newPassword")


class UpdateAccountSchema(LenientInputSchema):
    full_name = optional_string("fullName")
    email = optional_string()
    username = optional_string()


# ------------------------------- Responses ----------------------------------


class UserSchema(Schema):
    """Public representation of a user: never includes the password or refresh token."""

    id = fields.Integer(required=True)
    username = fields.String(required=True)
    email = fields.String(required=True)
    full_name = fields.String(data_key="fullName")
    avatar = fields.String()
    cover_image = fields.String(data_key="coverImage")
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    updated_at = fields.DateTime(data_key="updatedAt", allow_none=True)


class AccountSchema(UserSchema):
    """User representation returned by account updates; carries ``refreshToken``."""

    refresh_token = fields.String(data_key="refreshToken", allow_none=True)


class TokenPairSchema(Schema):
    access_token = fields.String(data_key="accessToken", required=True)
    refresh_token = fields.String(data_key="refreshToken", required=True)


class LoginResponseSchema(TokenPairSchema):
    user = fields.Nested(UserSchema, required=True)


class ChannelProfileSchema(Schema):
    """Channel page header with subscription aggregates."""

    id = fields.Integer(required=True)
    full_name = fields.String(data_key="fullName")
    username = fields.String()
    email = fields.String()
    avatar = fields.String()
    cover_image = fields.String(data_key="coverImage")
    subscribers_count = fields.Integer(data_key="subscribersCount")
    channel_subscribed_to_count = fields.Integer(data_key="channelSubscribedToCount")
    is_subscribed = fields.Boolean(data_key="isSubscribed")

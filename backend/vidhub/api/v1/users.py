"""User account endpoints: sessions, profile and channel lookup."""

from __future__ import annotations

from flask import Blueprint, current_app, g, request
from flask_jwt_extended import set_access_cookies, set_refresh_cookies, unset_jwt_cookies

from vidhub.api.deps import (
    api_response,
    profile_service,
    require_auth,
    session_service,
    staged_uploads,
    timing,
)
from vidhub.schemas import (
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
from vidhub.services.profiles.dto import UpdateAccountIn
from vidhub.services.sessions.dto import ChangePasswordIn, LoginIn, RefreshIn, RegisterIn

bp = Blueprint("users", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
refresh_schema = RefreshTokenSchema()
change_password_schema = ChangePasswordSchema()
update_account_schema = UpdateAccountSchema()
user_schema = UserSchema()
account_schema = AccountSchema()
token_pair_schema = TokenPairSchema()
login_response_schema = LoginResponseSchema()
channel_schema = ChannelProfileSchema()


def _json_body() -> dict:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


@bp.post("/register")
@timing
def register():
    """Create an account from a multipart form with ``avatar`` and optional ``coverImage``."""

    form = register_schema.load(request.form)
    with staged_uploads("avatar", "coverImage") as files:
        user = session_service().register(
            RegisterIn(
                full_name=form["full_name"],
                email=form["email"],
                username=form["username"],
                password=form["password"],
                avatar_path=files["avatar"],
                cover_image_path=files["coverImage"],
            )
        )
    return api_response(user_schema.dump(user), "User registered successfully", status=201)


@bp.post("/login")
@timing
def login():
    """Authenticate with username or email and set both token cookies."""

    data = login_schema.load(_json_body())
    result = session_service().login(
        LoginIn(username=data["username"], email=data["email"], password=data["password"])
    )
    response = api_response(login_response_schema.dump(result), "User logged in successfully")
    set_access_cookies(response, result.access_token)
    set_refresh_cookies(response, result.refresh_token)
    return response


@bp.post("/logout")
@require_auth
@timing
def logout():
    """Invalidate the stored refresh token and clear both cookies."""

    session_service().logout(g.current_user.id)
    response = api_response({}, "User logged out")
    unset_jwt_cookies(response)
    return response


@bp.post("/refresh-token")
@timing
def refresh_token():
    """Rotate the refresh token taken from the cookie or the JSON body."""

    cookie_name = current_app.config.get("JWT_REFRESH_COOKIE_NAME", "refreshToken")
    token = request.cookies.get(cookie_name) or refresh_schema.load(_json_body())["refresh_token"]
    pair = session_service().refresh(RefreshIn(refresh_token=token))
    response = api_response(token_pair_schema.dump(pair), "Access token refreshed")
    set_access_cookies(response, pair.access_token)
    set_refresh_cookies(response, pair.refresh_token)
    return response


@bp.post("/change-password")
@require_auth
@timing
def change_password():
    data = change_password_schema.load(_json_body())
    session_service().change_password(
        ChangePasswordIn(
            user_id=g.current_user.id,
            old_password=data["old_password"],
            new_password=data["new_password"],
        )
    )
    return api_response({}, "Password changed successfully")


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------


@bp.get("/current-user")
@require_auth
@timing
def current_user():
    return api_response(user_schema.dump(g.current_user), "User fetched successfully")


@bp.patch("/update-account")
@require_auth
@timing
def update_account():
    """Update full name, username and email; the response includes ``refreshToken``."""

    data = update_account_schema.load(_json_body())
    account = profile_service().update_account(
        UpdateAccountIn(
            user_id=g.current_user.id,
            full_name=data["full_name"],
            username=data["username"],
            email=data["email"],
        )
    )
    return api_response(account_schema.dump(account), "Account details updated successfully")


@bp.patch("/avatar")
@require_auth
@timing
def update_avatar():
    """Replace the avatar; responds with the asset host's upload result."""

    with staged_uploads("avatar") as files:
        result = profile_service().update_avatar(g.current_user.id, files["avatar"])
    return api_response(result.raw, "Avatar image updated successfully")


@bp.patch("/coverImage")
@require_auth
@timing
def update_cover_image():
    """Replace the cover image; responds with the asset host's upload result."""

    with staged_uploads("coverImage") as files:
        result = profile_service().update_cover_image(g.current_user.id, files["coverImage"])
    return api_response(result.raw, "Cover image updated successfully")


@bp.get("/c/<username>")
@require_auth
@timing
def channel_profile(username: str):
    profile = profile_service().get_channel_profile(username, viewer_id=g.current_user.id)
    return api_response(channel_schema.dump(profile), "User channel fetched successfully")

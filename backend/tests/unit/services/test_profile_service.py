# tests/unit/services/test_profile_service.py
from __future__ import annotations

import pytest
from tests.factories.subscription import SubscriptionFactory
from tests.factories.user import UserFactory

from vidhub.api.deps import profile_service
from vidhub.models.user import User
from vidhub.services._shared.dto import UserAccountOut
from vidhub.services._shared.errors import DependencyError, InvalidInputError, NotFoundError
from vidhub.services.profiles.dto import ChannelProfileOut, UpdateAccountIn
from vidhub.services.profiles.service import ProfileService


@pytest.fixture()
def service(asset_store) -> ProfileService:
    return ProfileService(asset_store=asset_store)


def test_dependency_wiring_uses_application_asset_store(app, asset_store):
    with app.app_context():
        svc = profile_service()
    assert isinstance(svc, ProfileService)
    assert svc.assets is asset_store


class TestGetUser:
    def test_returns_public_projection(self, service):
        user = UserFactory(refresh_token="rt")
        out = service.get_user(user.id)
        assert out.username == user.username
        assert not hasattr(out, "refresh_token")

    def test_unknown_user(self, service):
        with pytest.raises(NotFoundError, match="User does not exist"):
            service.get_user(999_999)


class TestUpdateAccount:
    def test_updates_details_and_returns_refresh_token(self, service, session):
        user = UserFactory(refresh_token="rt-live")
        session.commit()

        out = service.update_account(
            UpdateAccountIn(
                user_id=user.id, full_name="Ann B. Lee", username="AnnB", email="annb@example.com"
            )
        )

        assert isinstance(out, UserAccountOut)
        assert out.full_name == "Ann B. Lee"
        assert out.username == "annb"
        assert out.email == "annb@example.com"
        assert out.refresh_token == "rt-live"

    def test_email_kept_when_omitted(self, service, session):
        user = UserFactory(email="keep@example.com")
        session.commit()
        out = service.update_account(
            UpdateAccountIn(user_id=user.id, full_name="Kept", username="kept", email=None)
        )
        assert out.email == "keep@example.com"

    @pytest.mark.parametrize("full_name, username", [("", "u"), ("Name", None)])
    def test_all_fields_required(self, service, full_name, username):
        with pytest.raises(InvalidInputError, match="All fields are required"):
            service.update_account(
                UpdateAccountIn(user_id=1, full_name=full_name, username=username)
            )

    def test_taken_username(self, service, session):
        UserFactory(username="taken")
        user = UserFactory()
        session.commit()
        with pytest.raises(InvalidInputError, match="Username or email already taken"):
            service.update_account(
                UpdateAccountIn(user_id=user.id, full_name="X", username="TAKEN")
            )

    def test_invalid_email(self, service, session):
        user = UserFactory()
        session.commit()
        with pytest.raises(InvalidInputError, match="Email format looks invalid"):
            service.update_account(
                UpdateAccountIn(user_id=user.id, full_name="X", username="x", email="broken")
            )

    def test_unknown_user(self, service):
        with pytest.raises(NotFoundError):
            service.update_account(UpdateAccountIn(user_id=999_999, full_name="X", username="x"))


class TestMedia:
    def test_update_avatar_stores_secure_url(self, service, staged_file, session):
        user = UserFactory()
        session.commit()

        result = service.update_avatar(user.id, staged_file("new.png"))

        assert result.raw["secure_url"] == result.href
        session.expire_all()
        assert session.get(User, user.id).avatar == result.href

    def test_update_cover_image(self, service, staged_file, session):
        user = UserFactory()
        session.commit()
        result = service.update_cover_image(user.id, staged_file("cover.png"))
        session.expire_all()
        assert session.get(User, user.id).cover_image == result.href

    def test_missing_files(self, service):
        with pytest.raises(InvalidInputError, match="Avatar file is missing"):
            service.update_avatar(1, None)
        with pytest.raises(InvalidInputError, match="Cover image file is missing"):
            service.update_cover_image(1, None)

    def test_upload_failure_keeps_previous_media(self, service, staged_file, asset_store, session):
        user = UserFactory()
        session.commit()
        previous = user.avatar
        asset_store.fail = True

        with pytest.raises(DependencyError, match="Error while uploading avatar"):
            service.update_avatar(user.id, staged_file())
        with pytest.raises(DependencyError, match="Error while uploading cover image"):
            service.update_cover_image(user.id, staged_file("c.png"))

        session.expire_all()
        assert session.get(User, user.id).avatar == previous

    def test_unknown_user(self, service, staged_file):
        with pytest.raises(NotFoundError):
            service.update_avatar(999_999, staged_file())


class TestChannelProfile:
    def test_returns_aggregates(self, service, session):
        channel = UserFactory(username="omarcooks")
        viewer = UserFactory()
        SubscriptionFactory(subscriber=viewer, channel=channel)
        SubscriptionFactory(channel=channel)
        session.commit()

        out = service.get_channel_profile("OmarCooks", viewer_id=viewer.id)

        assert isinstance(out, ChannelProfileOut)
        assert out.username == "omarcooks"
        assert out.subscribers_count == 2
        assert out.channel_subscribed_to_count == 0
        assert out.is_subscribed is True

    def test_blank_username(self, service):
        with pytest.raises(InvalidInputError, match="username is missing"):
            service.get_channel_profile("  ", viewer_id=None)

    def test_unknown_channel(self, service):
        with pytest.raises(NotFoundError, match="Channel does not exist"):
            service.get_channel_profile("ghost", viewer_id=None)

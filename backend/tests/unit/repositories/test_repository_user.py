"""Tests for UserRepository lookups, projections and the channel aggregate."""

from __future__ import annotations

import pytest
from tests.factories.subscription import SubscriptionFactory
from tests.factories.user import UserFactory

from vidhub.models.subscription import Subscription
from vidhub.repositories import SubscriptionRepository, UserRepository


@pytest.fixture()
def repo(session) -> UserRepository:
    return UserRepository(session=session)


class TestLookups:
    def test_get_by_email_is_case_insensitive(self, repo):
        user = UserFactory(email="ann@example.com")
        assert repo.get_by_email("  ANN@example.com ") is user

    def test_get_by_username(self, repo):
        user = UserFactory(username="annl")
        assert repo.get_by_username("AnnL") is user
        assert repo.get_by_username("nobody") is None

    def test_find_by_identifier_matches_either(self, repo):
        ann = UserFactory(username="annl", email="ann@example.com")
        bob = UserFactory(username="bob", email="bob@example.com")

        assert repo.find_by_identifier(username="annl") is ann
        assert repo.find_by_identifier(email="BOB@example.com") is bob
        # username OR email: the username matches even with a foreign email
        assert repo.find_by_identifier(username="annl", email="nobody@example.com") is ann

    def test_find_by_identifier_ignores_blanks(self, repo):
        UserFactory()
        assert repo.find_by_identifier(username="  ", email="") is None
        assert repo.find_by_identifier() is None

    def test_exists_by_email_or_username(self, repo):
        UserFactory(username="annl", email="ann@example.com")
        assert repo.exists_by_email_or_username(email="x@example.com", username="ANNL")
        assert repo.exists_by_email_or_username(email="Ann@Example.com", username="other")
        assert not repo.exists_by_email_or_username(email="x@example.com", username="other")


class TestProjections:
    def test_public_projection_hides_secrets(self, repo):
        user = UserFactory(refresh_token="rt-1")
        row = repo.get_public(user.id)
        assert row is not None
        assert row["username"] == user.username
        assert "password_hash" not in row
        assert "refresh_token" not in row

    def test_account_projection_includes_refresh_token(self, repo):
        user = UserFactory(refresh_token="rt-1")
        row = repo.get_account(user.id)
        assert row is not None
        assert row["refresh_token"] == "rt-1"

    def test_projections_return_none_for_unknown_user(self, repo):
        assert repo.get_public(999_999) is None
        assert repo.get_account(999_999) is None

    def test_get_refresh_token(self, repo):
        user = UserFactory()
        assert repo.get_refresh_token(user.id) == (True, None)
        user.refresh_token = "rt-2"
        repo.flush()
        assert repo.get_refresh_token(user.id) == (True, "rt-2")
        assert repo.get_refresh_token(999_999) == (False, None)


class TestWrites:
    def test_patch_fields_updates_whitelisted_columns(self, repo, session):
        user = UserFactory()
        assert repo.patch_fields(user.id, refresh_token="rt-3", cover_image="https://c/x.png")
        session.expire_all()
        assert repo.get(user.id).refresh_token == "rt-3"
        assert repo.get(user.id).cover_image == "https://c/x.png"

    def test_patch_fields_reports_missing_row(self, repo):
        assert repo.patch_fields(999_999, refresh_token=None) is False

    def test_patch_fields_rejects_unknown_fields(self, repo):
        user = UserFactory()
        with pytest.raises(ValueError, match="non-updatable"):
            repo.patch_fields(user.id, password_hash="x")

    def test_update_password_rehashes(self, repo):
        user = UserFactory(password="old-pass")
        repo.update_password(user, "new-pass")
        assert user.verify_password("new-pass")
        assert not user.verify_password("old-pass")


class TestChannelProfile:
    def test_counts_and_viewer_flag(self, repo):
        channel = UserFactory(username="lenatravels")
        fan_a = UserFactory()
        fan_b = UserFactory()
        other = UserFactory()
        SubscriptionFactory(subscriber=fan_a, channel=channel)
        SubscriptionFactory(subscriber=fan_b, channel=channel)
        SubscriptionFactory(subscriber=channel, channel=other)

        row = repo.get_channel_profile("LenaTravels", viewer_id=fan_a.id)
        assert row is not None
        assert row["id"] == channel.id
        assert row["subscribers_count"] == 2
        assert row["channel_subscribed_to_count"] == 1
        assert row["is_subscribed"] is True

        row = repo.get_channel_profile("lenatravels", viewer_id=other.id)
        assert row["is_subscribed"] is False

    def test_without_viewer(self, repo):
        channel = UserFactory()
        row = repo.get_channel_profile(channel.username, viewer_id=None)
        assert row["subscribers_count"] == 0
        assert row["channel_subscribed_to_count"] == 0
        assert row["is_subscribed"] is False

    def test_unknown_channel(self, repo):
        assert repo.get_channel_profile("ghost", viewer_id=None) is None


class TestSubscriptionRepository:
    def test_subscribe_is_idempotent(self, session):
        subs = SubscriptionRepository(session=session)
        a, b = UserFactory(), UserFactory()
        first = subs.subscribe(a.id, b.id)
        second = subs.subscribe(a.id, b.id)
        assert first.id == second.id
        assert session.query(Subscription).filter_by(channel_id=b.id).count() == 1
        assert session.query(Subscription).filter_by(channel_id=a.id).count() == 0

from __future__ import annotations

from datetime import timedelta

import pytest

from vidhub.core import config
from vidhub.core.extensions import _build_asset_store
from vidhub.infra.assets.cloudinary_asset_store import CloudinaryAssetStore
from vidhub.services._shared.ports.asset_store import InMemoryAssetStore


@pytest.mark.parametrize("raw, expected", [("1", True), ("Yes", True), ("off", False), ("", False)])
def test_env_bool(monkeypatch, raw, expected):
    monkeypatch.setenv("VIDHUB_FLAG", raw)
    assert config.env_bool("VIDHUB_FLAG") is expected


def test_env_bool_default(monkeypatch):
    monkeypatch.delenv("VIDHUB_FLAG", raising=False)
    assert config.env_bool("VIDHUB_FLAG", True) is True


def test_env_seconds(monkeypatch):
    monkeypatch.setenv("VIDHUB_TTL", "90")
    assert config.env_seconds("VIDHUB_TTL", 10) == timedelta(seconds=90)
    monkeypatch.setenv("VIDHUB_TTL", " ")
    assert config.env_seconds("VIDHUB_TTL", 10) == timedelta(seconds=10)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("testing", config.TestingConfig),
        ("PRODUCTION", config.ProductionConfig),
        ("x", config.DevelopmentConfig),
    ],
)
def test_get_config(monkeypatch, name, expected):
    monkeypatch.setenv(config.ENV_VAR, name)
    assert config.get_config() is expected


def test_token_secrets_differ():
    assert config.TestingConfig.JWT_SECRET_KEY != config.TestingConfig.REFRESH_TOKEN_SECRET


def test_asset_store_selection(app, monkeypatch):
    assert isinstance(_build_asset_store(app), InMemoryAssetStore)

    monkeypatch.setitem(app.config, "ASSET_STORE", "cloudinary")
    monkeypatch.setitem(app.config, "CLOUDINARY_CLOUD_NAME", "demo")
    assert isinstance(_build_asset_store(app), CloudinaryAssetStore)

    monkeypatch.setitem(app.config, "ASSET_STORE", "s3")
    with pytest.raises(RuntimeError, match="Unknown ASSET_STORE"):
        _build_asset_store(app)

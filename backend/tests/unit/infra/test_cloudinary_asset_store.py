"""Unit tests for the Cloudinary adapter, with HTTP mocked by ``responses``."""

from __future__ import annotations

import hashlib

import pytest
import requests
import responses

from vidhub.infra.assets.cloudinary_asset_store import CloudinaryAssetStore, sign_params

UPLOAD_URL = "https://api.cloudinary.com/v1_1/demo/auto/upload"


@pytest.fixture()
def store() -> CloudinaryAssetStore:
    return CloudinaryAssetStore(cloud_name="demo", api_key="key-1", api_secret="s3cret")


@pytest.fixture()
def staged(staged_file):
    return staged_file("clip.png")


def test_sign_params_sorts_and_appends_secret():
    expected = hashlib.sha1(b"a=1&timestamp=42s3cret").hexdigest()  # noqa: S324
    assert sign_params({"timestamp": 42, "a": 1}, "s3cret") == expected


@responses.activate
def test_upload_success(store, staged):
    """A 200 answer becomes an UploadResult and the staged file is removed."""

    # Arrange
    body = {
        "public_id": "vidhub/clip",
        "url": "http://res.cloudinary.com/demo/image/upload/clip.png",
        "secure_url": "https://res.cloudinary.com/demo/image/upload/clip.png",
        "resource_type": "image",
        "format": "png",
        "bytes": 40,
        "width": 1,
        "height": 1,
    }
    responses.add(responses.POST, UPLOAD_URL, json=body, status=200)

    # Act
    result = store.upload(staged)

    # Assert
    assert result is not None
    assert result.href == body["secure_url"]
    assert result.public_id == "vidhub/clip"
    assert result.raw == body
    assert not staged.exists()

    sent = responses.calls[0].request
    assert b'name="api_key"' in sent.body
    assert b'name="signature"' in sent.body
    assert b'filename="clip.png"' in sent.body


@responses.activate
def test_upload_http_error_returns_none(store, staged):
    responses.add(responses.POST, UPLOAD_URL, json={"error": {"message": "bad"}}, status=401)
    assert store.upload(staged) is None
    assert not staged.exists()


@responses.activate
def test_upload_transport_error_returns_none(store, staged):
    responses.add(responses.POST, UPLOAD_URL, body=requests.ConnectionError("down"))
    assert store.upload(staged) is None
    assert not staged.exists()


@responses.activate
def test_upload_without_url_returns_none(store, staged):
    responses.add(responses.POST, UPLOAD_URL, json={"public_id": "x"}, status=200)
    assert store.upload(staged) is None


def test_missing_file_returns_none(store, tmp_path):
    assert store.upload(tmp_path / "nothing.png") is None
    assert store.upload(None) is None


def test_from_config_formats_upload_url():
    store = CloudinaryAssetStore.from_config(
        {
            "CLOUDINARY_CLOUD_NAME": "demo",
            "CLOUDINARY_API_KEY": "k",
            "CLOUDINARY_API_SECRET": "s",
            "ASSET_UPLOAD_TIMEOUT": 5,
        }
    )
    assert store.upload_url == UPLOAD_URL
    assert store.timeout == 5.0


def test_signature_matches_sent_timestamp(store, staged, monkeypatch):
    captured = {}

    def fake_post(url, data, files, timeout):
        captured.update(data)
        raise requests.Timeout("slow")

    monkeypatch.setattr(store._session, "post", fake_post)
    assert store.upload(staged) is None
    assert captured["signature"] == sign_params({"timestamp": captured["timestamp"]}, "s3cret")
    assert captured["api_key"] == "key-1"

"""In-process doubles shipped with the ports."""

from __future__ import annotations

import pytest

from vidhub.services._shared.ports import InMemoryAssetStore, StubTokenProvider, TokenDecodeError


class TestInMemoryAssetStore:
    def test_upload_consumes_file(self, staged_file):
        store = InMemoryAssetStore(base_url="https://cdn.test/")
        path = staged_file("pic.png")

        result = store.upload(path)

        assert result.href == "https://cdn.test/1-pic.png"
        assert result.raw["bytes"] == result.bytes
        assert store.uploads == ["pic.png"]
        assert not path.exists()

    def test_failure_mode_still_removes_file(self, staged_file):
        store = InMemoryAssetStore()
        store.fail = True
        path = staged_file()
        assert store.upload(path) is None
        assert not path.exists()

    def test_falsy_path(self):
        assert InMemoryAssetStore().upload(None) is None


class TestStubTokenProvider:
    def test_tokens_are_unique_and_typed(self):
        provider = StubTokenProvider()
        a = provider.create_refresh_token(identity=1)
        b = provider.create_refresh_token(identity=1)
        assert a != b
        assert provider.decode_refresh(a)["sub"] == "1"
        with pytest.raises(TokenDecodeError, match="invalid signature"):
            provider.decode_access(a)

"""
vidhub.services._shared.ports
=============================

*Ports* (hexagonal interfaces) the account services depend on.

Modules
-------
- :mod:`token_provider`:
    :class:`~.TokenProvider` for JWT creation and decoding, plus
    :class:`~.StubTokenProvider` for unit tests.

- :mod:`asset_store`:
    :class:`~.AssetStore` for pushing staged uploads to the asset host, plus
    :class:`~.InMemoryAssetStore` for tests and offline development.

Concrete adapters live under ``vidhub.infra``.
"""

from __future__ import annotations

from .asset_store import AssetStore, InMemoryAssetStore, UploadResult
from .token_provider import StubTokenProvider, TokenDecodeError, TokenProvider

__all__ = [
    "AssetStore",
    "InMemoryAssetStore",
    "UploadResult",
    "TokenProvider",
    "TokenDecodeError",
    "StubTokenProvider",
]

# vidhub/infra/assets/cloudinary_asset_store.py
from __future__ import annotations

import hashlib
import logging
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import requests

from vidhub.services._shared.ports.asset_store import AssetStore, UploadResult

log = logging.getLogger(__name__)


def sign_params(params: Mapping[str, Any], api_secret: str) -> str:
    """Return the Cloudinary signature for ``params``.

    Parameters are sorted by name, joined as ``k=v`` with ``&`` and the API
    secret is appended before hashing with SHA-1.
    """
    to_sign = "&".join(f"{k}={params[k]}" for k in sorted(params))
    return hashlib.sha1(f"{to_sign}{api_secret}".encode()).hexdigest()  # noqa: S324


class CloudinaryAssetStore(AssetStore):
    """
    Signed uploads to Cloudinary's ``auto`` endpoint over HTTPS.

    Any transport error or non-2xx answer is logged and reported as ``None``.
    The staged local file is removed whatever the outcome.
    """

    def __init__(
        self,
        *,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        upload_url: str = "https://api.cloudinary.com/v1_1/{cloud_name}/auto/upload",
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.upload_url = upload_url.format(cloud_name=cloud_name)
        self.timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> CloudinaryAssetStore:
        return cls(
            cloud_name=str(config.get("CLOUDINARY_CLOUD_NAME", "")),
            api_key=str(config.get("CLOUDINARY_API_KEY", "")),
            api_secret=str(config.get("CLOUDINARY_API_SECRET", "")),
            upload_url=str(
                config.get(
                    "CLOUDINARY_UPLOAD_URL",
                    "https://api.cloudinary.com/v1_1/{cloud_name}/auto/upload",
                )
            ),
            timeout=float(config.get("ASSET_UPLOAD_TIMEOUT", 30.0)),
        )

    def upload(self, local_path: Path | str | None) -> UploadResult | None:
        if not local_path:
            return None
        path = Path(local_path)
        try:
            return self._post(path)
        finally:
            path.unlink(missing_ok=True)

    def _post(self, path: Path) -> UploadResult | None:
        params = {"timestamp": int(time.time())}
        data = {
            **params,
            "api_key": self.api_key,
            "signature": sign_params(params, self.api_secret),
        }
        try:
            with path.open("rb") as fh:
                response = self._session.post(
                    self.upload_url,
                    data=data,
                    files={"file": (path.name, fh)},
                    timeout=self.timeout,
                )
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as exc:
            log.error("Asset upload failed for %s: %s", path.name, exc)
            return None
        except OSError as exc:
            log.error("Asset upload skipped, cannot read %s: %s", path.name, exc)
            return None

        secure_url = body.get("secure_url") or ""
        url = body.get("url") or secure_url
        if not url:
            log.error("Asset host returned no URL for %s", path.name)
            return None
        log.info("Asset uploaded as %s", body.get("public_id"))
        return UploadResult(
            url=url,
            secure_url=secure_url,
            public_id=body.get("public_id", ""),
            resource_type=body.get("resource_type", "image"),
            format=body.get("format"),
            bytes=body.get("bytes"),
            width=body.get("width"),
            height=body.get("height"),
            raw=body,
        )

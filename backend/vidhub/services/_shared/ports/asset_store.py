from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol


@dataclass(frozen=True, slots=True)
class UploadResult:
    """
    Descriptor returned by the asset host for a stored file.

    :param url: Public URL of the asset.
    :param secure_url: HTTPS URL of the asset (stored on the user).
    :param public_id: Host-side identifier.
    :param resource_type: ``image``, ``video`` or ``raw`` (host auto-detects).
    :param raw: Full host response, returned verbatim to clients on media updates.
    """

    url: str
    secure_url: str
    public_id: str = ""
    resource_type: str = "image"
    format: str | None = None
    bytes: int | None = None
    width: int | None = None
    height: int | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def href(self) -> str:
        """URL persisted on the user record (``secure_url`` when available)."""
        return self.secure_url or self.url


class AssetStore(Protocol):
    """Port for pushing a locally staged file to the remote asset host."""

    def upload(self, local_path: Path | str | None) -> UploadResult | None:
        """
        Upload the file at ``local_path``.

        Implementations return ``None`` when ``local_path`` is falsy or the
        upload fails, and always remove the local file afterwards.
        """
        ...


class InMemoryAssetStore(AssetStore):
    """Asset store used in tests and local development.

    Records uploaded file names and hands out deterministic URLs. Set
    ``fail = True`` to make every upload return ``None``.
    """

    def __init__(self, base_url: str = "https://assets.test/vidhub") -> None:
        self.base_url = base_url.rstrip("/")
        self.fail = False
        self.uploads: list[str] = []

    def upload(self, local_path: Path | str | None) -> UploadResult | None:
        if not local_path:
            return None
        path = Path(local_path)
        try:
            if self.fail or not path.exists():
                return None
            size = path.stat().st_size
            self.uploads.append(path.name)
            public_id = f"{len(self.uploads)}-{path.stem}"
            url = f"{self.base_url}/{public_id}{path.suffix}"
            raw = {
                "public_id": public_id,
                "url": url,
                "secure_url": url,
                "resource_type": "image",
                "bytes": size,
            }
            return UploadResult(
                url=url,
                secure_url=url,
                public_id=public_id,
                format=path.suffix.lstrip(".") or None,
                bytes=size,
                raw=raw,
            )
        finally:
            path.unlink(missing_ok=True)

    def reset(self) -> None:
        self.fail = False
        self.uploads.clear()

"""Tiny helpers shared across test modules."""

from __future__ import annotations

import io
from contextlib import contextmanager

# Smallest byte sequence the upload paths treat as an image
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@contextmanager
def not_raises(exception: type[BaseException]):
    """Context manager asserting that an exception is *not* raised.

    Parameters
    ----------
    exception: type[BaseException]
        Exception type that should not be raised within the context.

    Yields
    ------
    None
        Control enters the managed block when the exception is absent.
    """
    try:
        yield
    except exception as exc:  # pragma: no cover
        raise AssertionError(f"Did raise {exception}: {exc}") from exc


def png_upload(name: str = "avatar.png") -> tuple[io.BytesIO, str]:
    """Multipart file tuple accepted by the Flask test client."""
    return io.BytesIO(PNG_BYTES), name

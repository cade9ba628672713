"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields


class LenientInputSchema(Schema):
    """Base for request payloads whose required-field checks live in the services.

    Unknown keys are dropped; every declared field defaults to ``None`` so the
    flow can answer with its own message (``"All fields are required"`` etc.).
    """

    class Meta:
        unknown = EXCLUDE


def optional_string(data_key: str | None = None) -> fields.String:
    """String field that may be absent or ``null``."""
    return fields.String(load_default=None, allow_none=True, data_key=data_key)

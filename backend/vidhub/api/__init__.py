"""HTTP API: versioned blueprints mounted under ``API_BASE_PREFIX``."""

from __future__ import annotations

from collections.abc import Iterable

from flask import Blueprint, Flask


def register_blueprint_group(
    app: Flask,
    *,
    base_prefix: str,
    entries: Iterable[tuple[Blueprint, str]],
) -> None:
    """Mount each ``(blueprint, relative_prefix)`` pair below ``base_prefix``.

    An empty relative prefix mounts the blueprint at ``base_prefix`` itself
    (the health check lives at ``/api/v1/health``).
    """
    root = base_prefix.rstrip("/")
    for bp, rel_prefix in entries:
        rel = rel_prefix.strip("/")
        url_prefix = f"{root}/{rel}" if rel else root
        if not url_prefix.startswith("/"):
            url_prefix = "/" + url_prefix
        app.register_blueprint(bp, url_prefix=url_prefix)


def init_app(app: Flask) -> None:
    """Register API v1 on the Flask app."""

    from vidhub.api.v1 import API_VERSION, REGISTRY

    api_base = app.config.get("API_BASE_PREFIX", "/api")
    register_blueprint_group(app, base_prefix=f"{api_base}/{API_VERSION}", entries=REGISTRY)


__all__ = ["init_app", "register_blueprint_group"]

"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from flask import Flask, current_app
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

from vidhub.services._shared.ports.asset_store import AssetStore

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Global singletons (import-safe)
db: SQLAlchemy = SQLAlchemy(session_options={"autoflush": False}, metadata=metadata)
migrate = Migrate(render_as_batch=True)
jwt = JWTManager()

ASSET_STORE_KEY = "asset_store"


def _build_asset_store(app: Flask) -> AssetStore:
    """Instantiate the asset store selected by ``ASSET_STORE``."""
    kind = str(app.config.get("ASSET_STORE", "cloudinary")).strip().lower()
    if kind == "memory":
        from vidhub.services._shared.ports.asset_store import InMemoryAssetStore

        return InMemoryAssetStore()
    if kind == "cloudinary":
        from vidhub.infra.assets.cloudinary_asset_store import CloudinaryAssetStore

        return CloudinaryAssetStore.from_config(app.config)
    raise RuntimeError(f"Unknown ASSET_STORE {kind!r}; expected 'cloudinary' or 'memory'.")


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy, migrations, JWT and the asset store.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`vidhub.models` package to ensure SQLAlchemy metadata is ready for
        migrations.
    """
    db.init_app(app)

    # Ensure models are imported so Alembic sees metadata
    from vidhub import models as _models  # noqa: F401

    migrate.init_app(app, db)
    jwt.init_app(app)

    app.extensions[ASSET_STORE_KEY] = _build_asset_store(app)


def get_asset_store() -> AssetStore:
    """Return the asset store bound to the current application."""
    store = current_app.extensions.get(ASSET_STORE_KEY)
    if store is None:
        raise RuntimeError("Asset store is not initialized. Call init_app() first.")
    return store

"""Generic repository base for SQLAlchemy 2.x.

Persistence-only concerns shared by all repositories:

- Lookups by primary key and by whitelisted equality filters.
- Whitelisted column patches issued as a single ``UPDATE`` statement.
- No business logic and no commit/rollback; the Unit of Work owns transactions.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar, cast

from sqlalchemy import Select, and_, select, update
from sqlalchemy.orm import InstrumentedAttribute, Session

from vidhub.core.extensions import db

E = TypeVar("E")  # SQLAlchemy mapped entity type


class BaseRepository(Generic[E]):
    """Generic, persistence-only repository for a single aggregate.

    Subclasses MUST define ``model``; they MAY override
    ``_filterable_fields`` and ``_updatable_fields``.

    Repositories never open, commit or roll back transactions.
    """

    #: SQLAlchemy mapped model (must be set by subclasses)
    model: type[E]

    def __init__(self, session: Session | None = None) -> None:
        """Bind the repository to ``session`` or, when omitted, the Flask-scoped session.

        :param session: Session shared across the Unit of Work scope.
        :type session: :class:`sqlalchemy.orm.Session` | None
        """
        self._session: Session | None = session

    @property
    def session(self) -> Session:
        """Active SQLAlchemy session for this repository."""
        if self._session is not None:
            return self._session
        return cast(Session, db.session)

    # ------------------------------ Extensibility ----------------------------

    def _pk_attr(self) -> InstrumentedAttribute[Any] | None:
        return getattr(self.model, "id", None)

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]] | None:
        """Optional whitelist of equality-filterable fields.

        ``None`` applies every filter key via ``getattr(self.model, key)``.
        A mapping restricts filters to its keys; unknown keys are ignored.
        """
        return None

    def _updatable_fields(self) -> set[str]:
        """Whitelist of keys that may be written by :meth:`patch_fields`."""
        return set()

    # ------------------------------ Internals --------------------------------

    def _apply_equality_filters(
        self,
        stmt: Select[Any],
        filters: Mapping[str, Any] | None,
    ) -> Select[Any]:
        if not filters:
            return stmt

        allowed = self._filterable_fields()
        if allowed is None:
            clauses = [getattr(self.model, k) == v for k, v in filters.items()]
            return stmt.where(and_(*clauses)) if clauses else stmt

        whitelist_clauses: list[Any] = []
        for k, v in filters.items():
            col = allowed.get(k)
            if isinstance(col, InstrumentedAttribute):
                whitelist_clauses.append(col == v)
        return stmt.where(and_(*whitelist_clauses)) if whitelist_clauses else stmt

    def _sanitize_update_fields(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        """Return ``fields`` unchanged after checking every key is whitelisted.

        :raises ValueError: If no whitelist is configured or unknown keys are present.
        """
        allowed = self._updatable_fields()
        if not allowed:
            raise ValueError("No updatable fields configured for this repository.")

        unknown = sorted(k for k in fields if k not in allowed)
        if unknown:
            raise ValueError(f"Unknown or non-updatable fields: {unknown}")
        return dict(fields)

    # --------------------------------- CRUD ----------------------------------

    def add(self, instance: E) -> E:
        """Stage a new entity and flush so the primary key is populated."""
        self.session.add(instance)
        self.flush()
        return instance

    def get(self, entity_id: Any) -> E | None:
        """Retrieve a single entity by primary key.

        :raises RuntimeError: If no PK attribute can be detected.
        """
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError("BaseRepository.get requires a detectable PK attribute.")
        stmt = select(self.model).where(pk_attr == entity_id)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def find_one(self, **filters: Any) -> E | None:
        stmt: Select[Any] = select(self.model)
        stmt = self._apply_equality_filters(stmt, filters)
        return cast(E | None, self.session.execute(stmt).scalars().first())

    def flush(self) -> None:
        self.session.flush()

    # ----------------------------- Safe updates -------------------------------

    def patch_fields(self, entity_id: Any, **fields: Any) -> bool:
        """Write whitelisted ``fields`` with a single ``UPDATE ... WHERE pk = :id``.

        Model validators are bypassed, so only columns that need no
        normalization belong in the whitelist.

        :returns: ``True`` when a row was updated.
        """
        values = self._sanitize_update_fields(fields)
        pk_attr = self._pk_attr()
        if pk_attr is None:
            raise RuntimeError("BaseRepository.patch_fields requires a detectable PK attribute.")
        stmt = (
            update(self.model)
            .where(pk_attr == entity_id)
            .values(**values)
            .execution_options(synchronize_session="fetch")
        )
        result = self.session.execute(stmt)
        return bool(result.rowcount)

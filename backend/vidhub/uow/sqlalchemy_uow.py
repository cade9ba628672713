"""
SQLAlchemy implementation of UnitOfWork for Flask.
"""

from __future__ import annotations

from flask import current_app
from sqlalchemy import event
from sqlalchemy.orm import Session, SessionTransaction

from vidhub.core.extensions import db
from vidhub.repositories import SubscriptionRepository, UserRepository
from vidhub.uow.base import UnitOfWork


class SQLAlchemyRepositoryContainer:
    """Provide repository instances that share a SQLAlchemy session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=self.session)
        self.subscriptions = SubscriptionRepository(session=self.session)


class SQLAlchemyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-write UoW on the Flask-scoped session.

    Commits when the block exits cleanly, rolls back otherwise.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        # The session autobegins on first use.
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            try:
                self.commit()
            except Exception:
                self.rollback()
                raise
        else:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(SQLAlchemyRepositoryContainer, UnitOfWork):
    """
    Read-only Unit of Work backed by the Flask-scoped SQLAlchemy session.

    * When the session is idle, the UoW owns a fresh transaction and rolls it
      back on exit.
    * When a transaction is already running (an outer read-write scope or a
      test fixture), the UoW attaches to it and leaves it untouched.
    * In both cases ORM flushes are blocked while the scope is open, and
      ``commit()`` is refused.
    """

    def __init__(self) -> None:
        super().__init__(session=db.session)
        self._txn: SessionTransaction | None = None
        self._target: Session | None = None

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        # scoped_session proxies to the thread-local Session; listen on that instance
        target = self.session() if callable(self.session) else self.session
        self._target = target
        if not target.in_transaction():
            self._txn = target.begin()
        event.listen(target, "before_flush", self._block_flush)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        target = self._target
        try:
            if target is not None and self._txn is not None and self._txn.is_active:
                self._txn.rollback()
        finally:
            self._txn = None
            if target is not None and event.contains(target, "before_flush", self._block_flush):
                event.remove(target, "before_flush", self._block_flush)
            self._target = None

    def commit(self) -> None:
        """
        Disallow commit in read-only Unit of Work.

        :raises RuntimeError: always, to prevent accidental writes.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    @staticmethod
    def _block_flush(session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            current_app.logger.warning("Read-only UnitOfWork: flush blocked")
            raise RuntimeError(
                "Read-only UnitOfWork: ORM flush blocked (new/dirty/deleted objects present)."
            )

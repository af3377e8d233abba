"""SQLAlchemy implementation of UnitOfWork."""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import StoreUnavailableError
from app.repositories.sqlalchemy.database import SQLITE_BEGIN

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork:
    """
    Transaction boundary over a single session.

    Repositories bound to the same session only flush; this class decides
    when their writes become visible. Nested blocks join the outermost one,
    so a service method can call another without splitting the transaction.
    """

    def __init__(self, db: Session):
        self._db = db
        self._depth = 0

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Commit everything written inside the block, or nothing."""
        with self._scope(commit=True, begin="BEGIN IMMEDIATE"):
            yield

    @contextmanager
    def snapshot(self) -> Iterator[None]:
        """Read inside one transaction, released without writing."""
        with self._scope(commit=False, begin="BEGIN"):
            yield

    @contextmanager
    def _scope(self, commit: bool, begin: str) -> Iterator[None]:
        if self._depth:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        self._depth = 1
        try:
            if not self._db.in_transaction():
                # Writers take the store's write lock up front; readers pin
                # their snapshot at the first query.
                self._db.connection(execution_options={SQLITE_BEGIN: begin})
            yield
            if commit:
                self._db.commit()
            else:
                self._db.rollback()
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.error("Store operation failed: %s", e)
            raise StoreUnavailableError(str(e)) from e
        except BaseException:
            self._db.rollback()
            raise
        finally:
            self._depth = 0

"""SQLAlchemy-backed unit of work.

One session (one ``BEGIN IMMEDIATE`` transaction on SQLite) per ``with``
block.  Database errors leave the block as StorageFailure so callers only
ever see domain exceptions.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from posledger.domain.exceptions import StorageFailure
from posledger.domain.repository.unit_of_work import UnitOfWork
from posledger.infrastructure.persistence.sql_batch_repository import SqlBatchRepository
from posledger.infrastructure.persistence.sql_category_repository import SqlCategoryRepository
from posledger.infrastructure.persistence.sql_inventory_repository import SqlInventoryRepository
from posledger.infrastructure.persistence.sql_order_repository import SqlOrderRepository
from posledger.infrastructure.persistence.sql_product_repository import (
    SqlComboRepository,
    SqlProductRepository,
)

logger = logging.getLogger(__name__)


class SqlUnitOfWork(UnitOfWork):

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory
        self._session: Session | None = None

    def __enter__(self) -> SqlUnitOfWork:
        self._session = self._session_factory()
        self.products = SqlProductRepository(self._session)
        self.combos = SqlComboRepository(self._session)
        self.batches = SqlBatchRepository(self._session)
        self.inventory = SqlInventoryRepository(self._session)
        self.categories = SqlCategoryRepository(self._session)
        self.orders = SqlOrderRepository(self._session)
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        try:
            super().__exit__(exc_type, exc_value, traceback)
        finally:
            self._session.close()
            self._session = None
        if isinstance(exc_value, SQLAlchemyError):
            logger.error("Unit of work aborted by a database error: %s", exc_value)
            raise StorageFailure("Storage error, nothing was changed", error=str(exc_value)) from exc_value

    def commit(self) -> None:
        try:
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.error("Commit failed: %s", exc)
            raise StorageFailure("Could not commit changes, nothing was changed", error=str(exc)) from exc

    def rollback(self) -> None:
        if self._session is not None:
            self._session.rollback()

"""
Stock repository.

Services read and write stock items through this interface instead of the
session directly, so storage can be swapped in tests and the transaction
boundary stays in one place. The caller owns the transaction: nothing here
commits unless asked to.
"""

import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models import StockItem, StockMovement
from ..services.stock_adjustment.errors import StorageError

logger = logging.getLogger(__name__)


class StockRepository(ABC):
    """Storage contract for stock items and their movement log."""

    @abstractmethod
    def get_all(self) -> List[StockItem]:
        ...

    @abstractmethod
    def get_by_id(self, item_id: str, for_update: bool = False) -> Optional[StockItem]:
        """Return the item or None. for_update locks the row until commit/rollback."""

    @abstractmethod
    def get_movements(self, item_id: Optional[str] = None,
                      start: Optional[date] = None, end: Optional[date] = None) -> List[StockMovement]:
        ...

    @abstractmethod
    def add(self, item: StockItem) -> None:
        ...

    @abstractmethod
    def delete(self, item: StockItem) -> None:
        ...

    @abstractmethod
    def commit(self) -> None:
        ...

    @abstractmethod
    def rollback(self) -> None:
        ...


class SqlAlchemyStockRepository(StockRepository):
    """StockRepository over a SQLAlchemy session (normally db.session)."""

    def __init__(self, session: Session):
        self.session = session

    def get_all(self) -> List[StockItem]:
        try:
            return list(self.session.scalars(select(StockItem).order_by(StockItem.name)))
        except SQLAlchemyError as e:
            raise StorageError(f"Could not load stock items: {e}") from e

    def get_by_id(self, item_id: str, for_update: bool = False) -> Optional[StockItem]:
        if not item_id:
            return None
        try:
            return self.session.get(StockItem, item_id, with_for_update=for_update or None)
        except SQLAlchemyError as e:
            raise StorageError(f"Could not load stock item {item_id}: {e}") from e

    def get_movements(self, item_id=None, start=None, end=None) -> List[StockMovement]:
        query = select(StockMovement)
        if item_id:
            query = query.where(StockMovement.item_id == item_id)
        if start:
            query = query.where(StockMovement.movement_date >= start)
        if end:
            query = query.where(StockMovement.movement_date <= end)
        query = query.order_by(StockMovement.movement_date, StockMovement.id)
        try:
            return list(self.session.scalars(query))
        except SQLAlchemyError as e:
            raise StorageError(f"Could not load stock movements: {e}") from e

    def add(self, item: StockItem) -> None:
        self.session.add(item)

    def delete(self, item: StockItem) -> None:
        self.session.delete(item)

    def commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"STOCK REPOSITORY: commit failed: {e}")
            raise StorageError(str(e)) from e

    def rollback(self) -> None:
        self.session.rollback()


def default_repository() -> StockRepository:
    from ..extensions import db
    return SqlAlchemyStockRepository(db.session)

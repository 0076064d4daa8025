"""
Shared plumbing for stock adjustments.

Every single-item operation loads its item through the repository with a row
lock, mutates it in memory and commits once. Anything raised on the way rolls
the whole operation back.
"""

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from .errors import ItemNotFound, StockLedgerError, StorageError

logger = logging.getLogger(__name__)


def resolve_repository(repository=None):
    if repository is not None:
        return repository
    from ...repositories import default_repository
    return default_repository()


def load_item(repository, item_id, for_update=True):
    item = repository.get_by_id(item_id, for_update=for_update)
    if item is None:
        raise ItemNotFound(item_id)
    return item


@contextmanager
def stock_transaction(repository, operation: str):
    """Commit on success, roll back and re-raise on any failure."""
    try:
        yield
        repository.commit()
    except StockLedgerError as e:
        repository.rollback()
        logger.warning(f"{operation} rejected: {e}")
        raise
    except SQLAlchemyError as e:
        repository.rollback()
        logger.error(f"{operation} failed in storage: {e}")
        raise StorageError(str(e)) from e
    except Exception:
        repository.rollback()
        logger.exception(f"{operation} failed")
        raise

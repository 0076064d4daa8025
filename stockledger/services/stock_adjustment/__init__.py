"""
Stock Adjustment Service - Canonical Entry Point

Every change to batch quantities goes through these functions. Each one
validates before touching a row, locks the item, writes tagged notes plus
structured movements and commits once.
"""

from ._additive_ops import add_stock_batch
from ._creation_logic import create_stock_item, get_stock_item
from ._deductive_ops import record_stock_out, record_stock_release, release_stock
from ._depletion import Allocation, ReleaseStrategy, deplete, order_batches, plan_depletion, apply_depletion
from ._edit_logic import EDITABLE_FIELDS, delete_stock_item, update_stock_item
from ._notes import LedgerEntry, iter_ledger_entries, parse_ledger_line
from ._validation import validate_item_ledger_sync
from .errors import (
    InsufficientStock,
    InvalidQuantity,
    ItemNotFound,
    StockLedgerError,
    StorageError,
    ValidationError,
)

__all__ = [
    'create_stock_item',
    'get_stock_item',
    'update_stock_item',
    'delete_stock_item',
    'add_stock_batch',
    'record_stock_out',
    'record_stock_release',
    'release_stock',
    'validate_item_ledger_sync',
    'plan_depletion',
    'apply_depletion',
    'deplete',
    'order_batches',
    'Allocation',
    'ReleaseStrategy',
    'LedgerEntry',
    'parse_ledger_line',
    'iter_ledger_entries',
    'EDITABLE_FIELDS',
    'StockLedgerError',
    'ItemNotFound',
    'InvalidQuantity',
    'InsufficientStock',
    'ValidationError',
    'StorageError',
]

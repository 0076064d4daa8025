"""
Batch ledger primitives.

An item's available quantity is never stored; it is always derived from the
batches that hold it. These helpers work on anything shaped like a StockItem
(an object with a ``batches`` collection) so they stay usable from pure
planning code and tests without a database.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional

from ..utils.timezone_utils import TimezoneUtils


def total_quantity(item) -> int:
    """Sum of batch quantities. An item without batches holds 0."""
    return sum(int(batch.quantity or 0) for batch in (item.batches or []))


def active_batches(item) -> List:
    """Batches that still hold stock, in collection order."""
    return [batch for batch in (item.batches or []) if (batch.quantity or 0) > 0]


def soonest_expiry(item, today: Optional[date] = None) -> Optional[date]:
    """
    Earliest expiry among batches that still hold stock and have not expired.

    Expired batches and batches without an expiry date are ignored; when no
    batch qualifies the result is None.
    """
    today = today or TimezoneUtils.today()
    candidates = [
        batch.expiry_date
        for batch in active_batches(item)
        if batch.expiry_date is not None and batch.expiry_date >= today
    ]
    return min(candidates) if candidates else None


def is_expired(batch, today: Optional[date] = None) -> bool:
    """True when the batch carries an expiry date strictly before today."""
    if batch.expiry_date is None:
        return False
    today = today or TimezoneUtils.today()
    return batch.expiry_date < today


def expiring_between(batches: Iterable, start: date, end: date) -> List:
    """Stocked batches whose expiry falls within [start, end], soonest first."""
    selected = [
        batch for batch in batches
        if (batch.quantity or 0) > 0
        and batch.expiry_date is not None
        and start <= batch.expiry_date <= end
    ]
    return sorted(selected, key=lambda batch: batch.expiry_date)


__all__ = [
    "total_quantity",
    "active_batches",
    "soonest_expiry",
    "is_expired",
    "expiring_between",
]

"""
Stock overview service.

Dashboard figures computed from batch data: totals, low and out of stock
items, and batches that are expiring soon or already expired.
"""

import logging
from datetime import date, timedelta

from ..utils.timezone_utils import TimezoneUtils
from .batch_ledger import expiring_between, total_quantity

logger = logging.getLogger(__name__)

DEFAULT_EXPIRING_SOON_DAYS = 30


def _expiring_days_default():
    from flask import current_app, has_app_context
    if has_app_context():
        return int(current_app.config.get('STOCK_EXPIRING_SOON_DAYS', DEFAULT_EXPIRING_SOON_DAYS))
    return DEFAULT_EXPIRING_SOON_DAYS


def _batch_row(item, batch, today):
    return {
        'item_id': item.id,
        'item_name': item.name,
        'unit': item.unit,
        'batch_id': batch.id,
        'quantity': batch.quantity,
        'expiry_date': TimezoneUtils.format_date(batch.expiry_date),
        'days_until_expiry': (batch.expiry_date - today).days,
    }


def get_stock_overview(items, today=None, expiring_within_days=None):
    """Summary of stock health across all items."""
    today = today or TimezoneUtils.today()
    if expiring_within_days is None:
        expiring_within_days = _expiring_days_default()
    horizon = today + timedelta(days=expiring_within_days)

    items = list(items)
    low_stock = []
    out_of_stock = []
    expiring_soon = []
    expired = []
    total_units = 0

    for item in items:
        total = total_quantity(item)
        total_units += total
        if total == 0:
            out_of_stock.append({'item_id': item.id, 'item_name': item.name})
        elif total <= (item.min_threshold or 0):
            low_stock.append({
                'item_id': item.id,
                'item_name': item.name,
                'unit': item.unit,
                'total_quantity': total,
                'min_threshold': item.min_threshold,
                'shortfall': item.min_threshold - total,
            })

        for batch in expiring_between(item.batches or [], today, horizon):
            expiring_soon.append(_batch_row(item, batch, today))
        for batch in expiring_between(item.batches or [], date.min, today - timedelta(days=1)):
            expired.append(_batch_row(item, batch, today))

    low_stock.sort(key=lambda row: row['item_name'].lower())
    out_of_stock.sort(key=lambda row: row['item_name'].lower())
    expiring_soon.sort(key=lambda row: row['expiry_date'])
    expired.sort(key=lambda row: row['expiry_date'])

    if low_stock or expired:
        logger.info(f"STOCK OVERVIEW: {len(low_stock)} low stock, {len(expired)} expired batch(es)")

    return {
        'as_of': TimezoneUtils.format_date(today),
        'expiring_within_days': expiring_within_days,
        'total_unique_items': len(items),
        'total_quantity': total_units,
        'low_stock_items': low_stock,
        'low_stock_count': len(low_stock),
        'out_of_stock_items': out_of_stock,
        'out_of_stock_count': len(out_of_stock),
        'expiring_soon_batches': expiring_soon,
        'expired_batches': expired,
    }

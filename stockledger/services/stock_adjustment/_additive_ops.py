"""
Additive Operations Handler

Adds stock as a new dated batch. Existing batches are never topped up.
"""

import logging

from ...models import StockBatch
from ...utils.code_generator import generate_short_id
from ...utils.timezone_utils import TimezoneUtils
from ._audit import record_movement
from ._core import load_item, resolve_repository, stock_transaction
from ._notes import format_addition_note, has_additive_tag, parse_ledger_line, single_line
from ._validation import coerce_quantity, optional_text, parse_optional_date
from .errors import ValidationError

logger = logging.getLogger(__name__)


def _resolve_addition_note(notes, quantity, unit, today):
    """
    Return (note, change_type, movement_date) for a new batch.

    Notes that already open with an additive tag (bulk add composes its own)
    are kept on one line and the movement follows that tag. The tag must parse
    and carry the same quantity as the batch.
    """
    text = single_line(notes)
    if has_additive_tag(text):
        entry = parse_ledger_line(text)
        if entry is None or entry.direction != 'in':
            raise ValidationError("Tagged batch notes must start with a readable addition line.")
        if entry.quantity != quantity:
            raise ValidationError(
                f"Tagged batch notes record {entry.quantity} but the batch holds {quantity}."
            )
        return text, entry.kind, entry.date
    return format_addition_note('stock_addition', today, quantity, unit, text), 'stock_addition', today


def add_stock_batch(item_id, quantity, expiry_date=None, supplier=None, notes=None,
                    repository=None, today=None):
    """Add a new batch to an existing item; date_added is today."""
    quantity = coerce_quantity(quantity)
    expiry_date = parse_optional_date(expiry_date, 'Expiry date')
    repository = resolve_repository(repository)
    today = today or TimezoneUtils.today()

    logger.info(f"ADD STOCK BATCH: item_id={item_id}, quantity={quantity}")

    with stock_transaction(repository, 'ADD STOCK BATCH'):
        item = load_item(repository, item_id)
        note, change_type, movement_date = _resolve_addition_note(notes, quantity, item.unit, today)
        batch = StockBatch(
            id=generate_short_id(),
            quantity=quantity,
            expiry_date=expiry_date,
            date_added=today,
            supplier=optional_text(supplier),
            notes=note,
        )
        item.batches.append(batch)
        item.last_updated = today
        record_movement(item, batch.id, change_type, quantity, movement_date)

    logger.info(f"ADD STOCK BATCH SUCCESS: batch {batch.id} on item {item.id}, total now {item.total_quantity}")
    return item

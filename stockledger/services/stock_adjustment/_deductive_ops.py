"""
Deductive Operations Handler

Consumption and releases drain batches through the depletion engine and write
one tagged line per touched batch.
"""

import logging

from ...utils.timezone_utils import TimezoneUtils
from ._audit import record_movement
from ._core import load_item, resolve_repository, stock_transaction
from ._depletion import ReleaseStrategy, apply_depletion, plan_depletion
from ._notes import format_release_note, format_stock_out_note
from ._validation import coerce_quantity, optional_text, parse_optional_date, require_text

logger = logging.getLogger(__name__)


def _deduct(item, quantity, change_type, movement_date, note_formatter, strategy, today,
            voucher_id=None, recipient=None, reason=None):
    plan = plan_depletion(item.batches, quantity, strategy)
    apply_depletion(item.batches, plan, note_formatter, item.unit)
    for allocation in plan:
        record_movement(
            item, allocation.batch_id, change_type, allocation.quantity, movement_date,
            voucher_id=voucher_id, recipient=recipient, reason=reason,
        )
    item.last_updated = today
    return plan


def record_stock_out(item_id, quantity, reason, consumption_date=None, repository=None, today=None):
    """Consume stock internally (FEFO). Returns (item, allocations)."""
    quantity = coerce_quantity(quantity)
    reason = require_text(reason, 'Reason')
    consumption_date = parse_optional_date(consumption_date, 'Consumption date')
    repository = resolve_repository(repository)
    today = today or TimezoneUtils.today()
    on_date = consumption_date or today

    logger.info(f"STOCK OUT: item_id={item_id}, quantity={quantity}")

    def note(batch, qty, unit):
        return format_stock_out_note(on_date, batch.id, qty, unit, reason)

    with stock_transaction(repository, 'STOCK OUT'):
        item = load_item(repository, item_id)
        plan = _deduct(item, quantity, 'stock_out', on_date, note, ReleaseStrategy.FEFO, today, reason=reason)

    logger.info(f"STOCK OUT SUCCESS: {quantity} {item.unit} from {len(plan)} batch(es) of {item.id}")
    return item, plan


def release_stock(item_id, quantity, released_to, reason=None, release_date=None,
                  strategy=ReleaseStrategy.FEFO, voucher_id=None, repository=None, today=None):
    """Release stock to a recipient; a voucher_id marks it as part of a bulk release."""
    quantity = coerce_quantity(quantity)
    released_to = require_text(released_to, 'Recipient')
    reason = optional_text(reason)
    release_date = parse_optional_date(release_date, 'Release date')
    strategy = ReleaseStrategy.coerce(strategy)
    repository = resolve_repository(repository)
    today = today or TimezoneUtils.today()
    on_date = release_date or today
    change_type = 'bulk_stock_release' if voucher_id else 'stock_release'

    logger.info(f"STOCK RELEASE: item_id={item_id}, quantity={quantity}, to={released_to}, strategy={strategy.value}")

    def note(batch, qty, unit):
        return format_release_note(on_date, batch.id, qty, unit, released_to, reason, voucher_id)

    with stock_transaction(repository, 'STOCK RELEASE'):
        item = load_item(repository, item_id)
        plan = _deduct(
            item, quantity, change_type, on_date, note, strategy, today,
            voucher_id=voucher_id, recipient=released_to, reason=reason,
        )

    logger.info(f"STOCK RELEASE SUCCESS: {quantity} {item.unit} of {item.id} to {released_to}")
    return item, plan


def record_stock_release(item_id, quantity, released_to, reason=None, release_date=None,
                         strategy=ReleaseStrategy.FEFO, repository=None, today=None):
    """Release stock to a named recipient. Returns (item, allocations)."""
    return release_stock(
        item_id, quantity, released_to, reason=reason, release_date=release_date,
        strategy=strategy, repository=repository, today=today,
    )

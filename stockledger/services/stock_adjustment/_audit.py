"""
Structured movement recording.

Each tagged line written into batch notes gets a matching StockMovement row
so history can be read exactly instead of re-parsed from free text.
"""

import logging

from ...models import StockMovement
from ._operation_registry import get_direction

logger = logging.getLogger(__name__)


def record_movement(item, batch_id, change_type, quantity, movement_date,
                    voucher_id=None, recipient=None, reason=None):
    """Append a movement to the item's log. Persisted with the item's transaction."""
    movement = StockMovement(
        item_id=item.id,
        batch_id=batch_id,
        kind=change_type,
        direction=get_direction(change_type),
        quantity=quantity,
        movement_date=movement_date,
        voucher_id=voucher_id,
        recipient=recipient,
        reason=reason,
    )
    item.movements.append(movement)
    logger.debug(f"MOVEMENT: {change_type} {movement.direction} {quantity} item={item.id} batch={batch_id}")
    return movement

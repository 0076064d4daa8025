import logging
from typing import Optional

from ...models.category import ItemCategory
from ...utils.timezone_utils import TimezoneUtils
from ..batch_ledger import total_quantity
from .errors import InvalidQuantity, ValidationError

logger = logging.getLogger(__name__)


def coerce_quantity(value, allow_zero: bool = False, label: str = 'Quantity') -> int:
    """Accept whole numbers only (ints, integral floats, digit strings)."""
    if isinstance(value, bool) or value is None:
        raise InvalidQuantity(f"{label} must be a whole number.")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidQuantity(f"{label} must be a whole number.")
        value = int(value)
    elif isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise InvalidQuantity(f"{label} must be a whole number.") from None
    elif not isinstance(value, int):
        raise InvalidQuantity(f"{label} must be a whole number.")

    if allow_zero:
        if value < 0:
            raise InvalidQuantity(f"{label} must be >= 0.")
    elif value <= 0:
        raise InvalidQuantity(f"{label} must be > 0.")
    return value


def require_text(value, label: str) -> str:
    text = str(value).strip() if value is not None else ''
    if not text:
        raise ValidationError(f"{label} is required.")
    return text


def optional_text(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_optional_date(value, label: str):
    try:
        return TimezoneUtils.parse_date(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a YYYY-MM-DD date.") from None


def validate_category(value) -> str:
    category = require_text(value, 'Category')
    if category not in ItemCategory.values():
        raise ValidationError(f"Unknown category: {category}")
    return category


def validate_item_ledger_sync(item, movements=None):
    """Check that batch totals match the structured movement log for one item.

    Returns (is_valid, error_msg, batch_total, ledger_total).
    """
    if movements is None:
        movements = item.movements

    batch_total = total_quantity(item)
    ledger_total = sum(
        m.quantity if m.direction == 'in' else -m.quantity
        for m in movements
    )

    if batch_total != ledger_total:
        logger.error(f"LEDGER SYNC MISMATCH for item {item.id} ({item.name}):")
        logger.error(f"  Batch total: {batch_total}")
        logger.error(f"  Ledger total: {ledger_total}")
        logger.error(f"  Movements: {len(movements)}")
        error_msg = f"Ledger sync error: batches={batch_total}, ledger={ledger_total}, diff={batch_total - ledger_total}"
        return False, error_msg, batch_total, ledger_total

    return True, None, batch_total, ledger_total

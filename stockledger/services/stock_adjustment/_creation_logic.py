import logging

from ...models import StockBatch, StockItem
from ...utils.code_generator import generate_short_id
from ...utils.timezone_utils import TimezoneUtils
from ._audit import record_movement
from ._core import load_item, resolve_repository, stock_transaction
from ._notes import format_addition_note
from ._validation import (
    coerce_quantity,
    optional_text,
    parse_optional_date,
    require_text,
    validate_category,
)
from .errors import ValidationError

logger = logging.getLogger(__name__)


def create_stock_item(name, category, unit, min_threshold=0, first_batch=None,
                      notes=None, origin_country=None, repository=None, today=None):
    """Create an item together with its Initial Stock batch.

    first_batch: mapping with quantity (>= 0), expiry_date, supplier, notes.
    """
    repository = resolve_repository(repository)
    today = today or TimezoneUtils.today()

    name = require_text(name, 'Name')
    category = validate_category(category)
    unit = require_text(unit, 'Unit')
    min_threshold = coerce_quantity(min_threshold if min_threshold is not None else 0,
                                    allow_zero=True, label='Minimum threshold')

    first_batch = dict(first_batch or {})
    if 'quantity' not in first_batch:
        raise ValidationError("First batch quantity is required.")
    quantity = coerce_quantity(first_batch.get('quantity'), allow_zero=True, label='Initial quantity')
    expiry_date = parse_optional_date(first_batch.get('expiry_date'), 'Expiry date')

    logger.info(f"CREATE STOCK ITEM: {name} ({category}), initial quantity {quantity} {unit}")

    item = StockItem(
        id=generate_short_id(),
        name=name,
        category=category,
        unit=unit,
        min_threshold=min_threshold,
        last_updated=today,
        notes=optional_text(notes),
        origin_country=optional_text(origin_country),
    )
    batch = StockBatch(
        id=generate_short_id(),
        quantity=quantity,
        expiry_date=expiry_date,
        date_added=today,
        supplier=optional_text(first_batch.get('supplier')),
        notes=format_addition_note('initial_stock', today, quantity, unit, first_batch.get('notes')),
    )
    item.batches.append(batch)
    record_movement(item, batch.id, 'initial_stock', quantity, today)

    with stock_transaction(repository, 'CREATE STOCK ITEM'):
        repository.add(item)

    logger.info(f"CREATED: New stock item {item.id} - {item.name}")
    return item


def get_stock_item(item_id, repository=None):
    repository = resolve_repository(repository)
    return load_item(repository, item_id, for_update=False)

import logging

from ...utils.timezone_utils import TimezoneUtils
from ._core import load_item, resolve_repository, stock_transaction
from ._validation import coerce_quantity, optional_text, require_text, validate_category
from .errors import ValidationError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'category', 'unit', 'min_threshold', 'notes', 'origin_country')


def _clean_field(field, value):
    if field == 'name':
        return require_text(value, 'Name')
    if field == 'category':
        return validate_category(value)
    if field == 'unit':
        return require_text(value, 'Unit')
    if field == 'min_threshold':
        return coerce_quantity(value, allow_zero=True, label='Minimum threshold')
    return optional_text(value)


def update_stock_item(item_id, repository=None, today=None, **fields):
    """Update an item's definition. Batches are never touched here."""
    unknown = sorted(set(fields) - set(EDITABLE_FIELDS))
    if unknown:
        raise ValidationError(f"Fields cannot be edited: {', '.join(unknown)}")

    cleaned = {field: _clean_field(field, value) for field, value in fields.items()}

    repository = resolve_repository(repository)
    today = today or TimezoneUtils.today()

    with stock_transaction(repository, 'UPDATE STOCK ITEM'):
        item = load_item(repository, item_id)
        for field, value in cleaned.items():
            setattr(item, field, value)
        item.last_updated = today

    logger.info(f"UPDATED: Stock item {item.id} fields {sorted(cleaned)}")
    return item


def delete_stock_item(item_id, repository=None):
    """Delete an item with its batches and movement log."""
    repository = resolve_repository(repository)

    with stock_transaction(repository, 'DELETE STOCK ITEM'):
        item = load_item(repository, item_id)
        name = item.name
        repository.delete(item)

    logger.info(f"DELETED: Stock item {item_id} - {name}")
    return True

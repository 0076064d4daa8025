"""
Centralized Operation Registry

Single source of truth for the stock ledger event kinds: the tag written into
batch notes, the movement direction and the verb that must follow the tag.
Both the note writers and the movement parser are built from this table.
"""

import re
from typing import Dict, Any

# ============================================================================
# OPERATION TYPE REGISTRY - Single Source of Truth
# ============================================================================

OPERATION_REGISTRY = {
    # ADDITIVE OPERATIONS - create a new batch
    'initial_stock': {
        'type': 'additive',
        'tag': 'Initial Stock',
        'verb': 'Added',
        'description': 'First batch written when an item is created',
    },
    'stock_addition': {
        'type': 'additive',
        'tag': 'Stock Addition',
        'verb': 'Added',
        'description': 'New batch added to an existing item',
    },
    'bulk_add_stock': {
        'type': 'additive',
        'tag': 'Bulk Add Stock',
        'verb': 'Added',
        'description': 'New batch added as one entry of a bulk add',
    },

    # DEDUCTIVE OPERATIONS - drain batches in FEFO/FIFO order
    'stock_out': {
        'type': 'deductive',
        'tag': 'Stock Out',
        'verb': 'Consumed',
        'description': 'Internal consumption with a mandatory reason',
    },
    'stock_release': {
        'type': 'deductive',
        'tag': 'Stock Release',
        'verb': 'Released',
        'description': 'Hand-off of stock to a named recipient',
    },
    'bulk_stock_release': {
        'type': 'deductive',
        'tag': 'Bulk Stock Release',
        'verb': 'Released',
        'voucher': True,
        'description': 'Release entry sharing a voucher with its bulk operation',
    },
}

DIRECTION_BY_TYPE = {
    'additive': 'in',
    'deductive': 'out',
}

ADDITIVE_TAG_PREFIXES = tuple(
    f"[{config['tag']}"
    for config in OPERATION_REGISTRY.values()
    if config['type'] == 'additive'
)

_DATE_PART = r'(?P<date>\d{4}-\d{2}-\d{2})'
_VOUCHER_PART = r'(?: \| Voucher: (?P<voucher>[^\]]*?))?'


def get_operation_config(change_type: str) -> Dict[str, Any]:
    """Get configuration for an operation type"""
    return OPERATION_REGISTRY.get(change_type, {})


def is_additive_operation(change_type: str) -> bool:
    return get_operation_config(change_type).get('type') == 'additive'


def get_direction(change_type: str) -> str:
    config = get_operation_config(change_type)
    if not config:
        raise KeyError(f"Unknown stock operation: {change_type}")
    return DIRECTION_BY_TYPE[config['type']]


def get_tag(change_type: str) -> str:
    config = get_operation_config(change_type)
    if not config:
        raise KeyError(f"Unknown stock operation: {change_type}")
    return config['tag']


def build_line_pattern(change_type: str) -> "re.Pattern":
    """
    Anchored, case-insensitive pattern for one ledger line kind.

    Only the tag, the date, the verb and the quantity are required; anything
    after the quantity (unit, batch id, reason) is tolerated as free text.
    """
    config = OPERATION_REGISTRY[change_type]
    voucher = _VOUCHER_PART if config.get('voucher') else ''
    pattern = (
        r'^\s*\[' + re.escape(config['tag']) + r' - ' + _DATE_PART + voucher
        + r'\]:\s*' + re.escape(config['verb']) + r'\s+(?P<quantity>\d+)\b'
    )
    return re.compile(pattern, re.IGNORECASE)


LINE_PATTERNS = {change_type: build_line_pattern(change_type) for change_type in OPERATION_REGISTRY}


__all__ = [
    'OPERATION_REGISTRY',
    'ADDITIVE_TAG_PREFIXES',
    'LINE_PATTERNS',
    'get_operation_config',
    'is_additive_operation',
    'get_direction',
    'get_tag',
    'build_line_pattern',
]

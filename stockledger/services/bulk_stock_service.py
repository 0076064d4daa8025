from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, List, Mapping, MutableMapping, Optional, Sequence

from ..utils.code_generator import generate_voucher_id
from ..utils.timezone_utils import TimezoneUtils
from .batch_ledger import total_quantity
from .stock_adjustment import add_stock_batch, release_stock
from .stock_adjustment._core import resolve_repository
from .stock_adjustment._depletion import ReleaseStrategy
from .stock_adjustment._notes import format_addition_note
from .stock_adjustment._validation import parse_optional_date, require_text
from .stock_adjustment.errors import InsufficientStock, StockLedgerError

logger = logging.getLogger(__name__)

INVALID_ENTRY = 'Invalid entry.'
ADD_ENTRY_FIELDS = ('item_id', 'quantity', 'expiry_date', 'supplier', 'notes')


@dataclass
class BulkReleaseResult:
    success: bool
    voucher_id: str
    processed_items: List[MutableMapping[str, Any]] = field(default_factory=list)
    errors: List[MutableMapping[str, Any]] = field(default_factory=list)
    common_details: MutableMapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class BulkAddResult:
    success: bool
    processed_items: List[MutableMapping[str, Any]] = field(default_factory=list)
    errors: List[MutableMapping[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


class BulkStockService:
    """
    Multi-entry stock operations.

    Each entry runs in its own transaction. A failing entry is recorded in the
    result's errors and the remaining entries still run.
    """

    def __init__(self, repository=None, today: Optional[date] = None):
        self.repository = resolve_repository(repository)
        self.today = today

    def _today(self) -> date:
        return self.today or TimezoneUtils.today()

    def process_bulk_release(
        self,
        released_to: str,
        items: Sequence[Any] | None,
        *,
        reason: Optional[str] = None,
        release_date=None,
        strategy=ReleaseStrategy.FEFO,
    ) -> BulkReleaseResult:
        """Release several items to one recipient under a shared voucher."""
        released_to = require_text(released_to, 'Recipient')
        strategy = ReleaseStrategy.coerce(strategy)
        release_date = parse_optional_date(release_date, 'Release date')
        reason = _clean_string(reason)
        voucher_id = generate_voucher_id()
        common_details = {
            'released_to': released_to,
            'reason': reason,
            'release_date': TimezoneUtils.format_date(release_date or self._today()),
            'voucher_id': voucher_id,
        }

        logger.info(f"BULK STOCK RELEASE: voucher={voucher_id}, to={released_to}, entries={len(items or [])}")

        processed: list = []
        errors: list = []
        for raw in items or []:
            entry = self._normalize_release_entry(raw)
            if entry is None:
                outcome = _error(None, None, INVALID_ENTRY)
            else:
                outcome = self._release_entry(entry, released_to, reason, release_date, strategy, voucher_id)
            (processed if outcome.pop('ok') else errors).append(outcome)

        success = not errors and bool(processed)
        if errors:
            logger.warning(f"BULK STOCK RELEASE: voucher={voucher_id} finished with {len(errors)} error(s)")
        return BulkReleaseResult(
            success=success,
            voucher_id=voucher_id,
            processed_items=processed,
            errors=errors,
            common_details=common_details,
        )

    def process_bulk_add(self, items: Sequence[Any] | None) -> BulkAddResult:
        """Add one new batch per entry, each tagged as a bulk addition."""
        logger.info(f"BULK ADD STOCK: entries={len(items or [])}")

        processed: list = []
        errors: list = []
        for raw in items or []:
            entry = self._normalize_add_entry(raw)
            outcome = _error(None, None, INVALID_ENTRY) if entry is None else self._add_entry(entry)
            (processed if outcome.pop('ok') else errors).append(outcome)

        success = not errors and bool(processed)
        return BulkAddResult(success=success, processed_items=processed, errors=errors)

    # ------------------------------------------------------------------
    # Per-entry steps
    # ------------------------------------------------------------------
    def _release_entry(self, entry, released_to, reason, release_date, strategy, voucher_id):
        item_id = entry['item_id']
        quantity = entry['quantity']
        item = self.repository.get_by_id(item_id) if item_id else None
        if item is None:
            return _error(item_id, None, 'Item not found.')
        name = item.name
        if quantity is None or quantity <= 0:
            return _error(item_id, name, 'Quantity must be > 0.')
        available = total_quantity(item)
        if quantity > available:
            return _error(item_id, name, f'Not enough stock. Available: {available}')

        try:
            item, plan = release_stock(
                item_id, quantity, released_to,
                reason=reason,
                release_date=release_date,
                strategy=strategy,
                voucher_id=voucher_id,
                repository=self.repository,
                today=self._today(),
            )
        except InsufficientStock as exc:
            return _error(item_id, name, f'Not enough stock. Available: {exc.available}')
        except StockLedgerError as exc:
            return _error(item_id, name, str(exc))

        return {
            'ok': True,
            'item_id': item.id,
            'name': item.name,
            'unit': item.unit,
            'quantity': quantity,
            'allocations': [allocation.to_dict() for allocation in plan],
        }

    def _add_entry(self, entry):
        item_id = entry['item_id']
        quantity = entry['quantity']
        item = self.repository.get_by_id(item_id) if item_id else None
        if item is None:
            return _error(item_id, None, 'Item not found.')
        name = item.name
        if quantity is None or quantity <= 0:
            return _error(item_id, name, 'Quantity added must be > 0.')

        today = self._today()
        note = format_addition_note('bulk_add_stock', today, quantity, item.unit, entry['notes'])
        try:
            item = add_stock_batch(
                item_id, quantity,
                expiry_date=entry['expiry_date'],
                supplier=entry['supplier'],
                notes=note,
                repository=self.repository,
                today=today,
            )
        except StockLedgerError as exc:
            return _error(item_id, name, str(exc))

        return {
            'ok': True,
            'item_id': item.id,
            'name': item.name,
            'quantity': quantity,
            'batch_id': item.batches[-1].id,
            'total_quantity': item.total_quantity,
        }

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _normalize_release_entry(self, raw: Any) -> Optional[MutableMapping[str, Any]]:
        """Accept {item_id, quantity} mappings or (item_id, quantity) pairs; None otherwise."""
        if isinstance(raw, Mapping):
            item_id = raw.get('item_id') or raw.get('itemId')
            quantity = raw.get('quantity')
            if quantity is None:
                quantity = raw.get('quantity_released')
        elif isinstance(raw, (list, tuple)) and len(raw) == 2:
            item_id, quantity = raw
        else:
            return None
        return {
            'item_id': _clean_string(item_id),
            'quantity': _safe_int(quantity),
        }

    def _normalize_add_entry(self, raw: Any) -> Optional[MutableMapping[str, Any]]:
        """Accept mappings or (item_id, quantity, expiry_date, supplier, notes) tuples.

        Trailing tuple fields may be left off.
        """
        if isinstance(raw, Mapping):
            quantity = raw.get('quantity')
            if quantity is None:
                quantity = raw.get('quantity_added')
            fields = {
                'item_id': raw.get('item_id') or raw.get('itemId'),
                'quantity': quantity,
                'expiry_date': raw.get('expiry_date') or raw.get('expiryDate'),
                'supplier': raw.get('supplier'),
                'notes': raw.get('notes') or raw.get('batch_notes'),
            }
        elif isinstance(raw, (list, tuple)) and 2 <= len(raw) <= len(ADD_ENTRY_FIELDS):
            fields = dict(zip(ADD_ENTRY_FIELDS, raw))
        else:
            return None
        return {
            'item_id': _clean_string(fields.get('item_id')),
            'quantity': _safe_int(fields.get('quantity')),
            'expiry_date': fields.get('expiry_date'),
            'supplier': _clean_string(fields.get('supplier')),
            'notes': _clean_string(fields.get('notes')),
        }


def _error(item_id, name, message) -> MutableMapping[str, Any]:
    return {'ok': False, 'item_id': item_id, 'name': name, 'error': message}


def _clean_string(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _safe_int(value: Any) -> Optional[int]:
    if value in (None, "", "null") or isinstance(value, bool):
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None

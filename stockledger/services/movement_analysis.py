"""
Movement reconstruction.

Rebuilds in/out statistics for a date range. analyze_stock_movement reads the
tagged lines back out of batch notes; analyze_recorded_movements does the same
from the structured StockMovement log. For data written only through the
stock adjustment service both return identical results.

Lines whose tag is damaged (hand-edited notes, impossible dates) are skipped
silently by the notes variant. That is the known limit of reading history out
of free text.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional

from .stock_adjustment._notes import LedgerEntry, iter_ledger_entries, parse_ledger_line
from .stock_adjustment._validation import parse_optional_date
from .stock_adjustment.errors import ValidationError


@dataclass
class MovementSummary:
    total_stock_in_quantity: int = 0
    total_stock_out_quantity: int = 0
    stock_in_transactions: int = 0
    stock_out_transactions: int = 0
    net_change: int = 0


@dataclass
class ItemMovement:
    item_id: str
    item_name: str
    item_unit: str
    quantity_in: int = 0
    quantity_out: int = 0
    in_transactions: int = 0
    out_transactions: int = 0
    net_change: int = 0

    def add(self, direction: str, quantity: int) -> None:
        if direction == 'in':
            self.quantity_in += quantity
            self.in_transactions += 1
        else:
            self.quantity_out += quantity
            self.out_transactions += 1
        self.net_change = self.quantity_in - self.quantity_out


@dataclass
class MovementAnalysis:
    start_date: date
    end_date: date
    overall_summary: MovementSummary = field(default_factory=MovementSummary)
    items_breakdown: List[ItemMovement] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = asdict(self)
        data['start_date'] = self.start_date.isoformat()
        data['end_date'] = self.end_date.isoformat()
        return data


def _check_range(start, end):
    start = parse_optional_date(start, 'Start date')
    end = parse_optional_date(end, 'End date')
    if start is None or end is None:
        raise ValidationError("Start and end dates are required.")
    if start > end:
        raise ValidationError("Start date must be on or before end date.")
    return start, end


def _summarize(start, end, breakdown: Dict[str, ItemMovement]) -> MovementAnalysis:
    items = sorted(
        (entry for entry in breakdown.values() if entry.in_transactions or entry.out_transactions),
        key=lambda entry: (entry.item_name.lower(), entry.item_id),
    )
    summary = MovementSummary()
    for entry in items:
        summary.total_stock_in_quantity += entry.quantity_in
        summary.total_stock_out_quantity += entry.quantity_out
        summary.stock_in_transactions += entry.in_transactions
        summary.stock_out_transactions += entry.out_transactions
    summary.net_change = summary.total_stock_in_quantity - summary.total_stock_out_quantity
    return MovementAnalysis(start_date=start, end_date=end, overall_summary=summary, items_breakdown=items)


def _bucket(breakdown, item) -> ItemMovement:
    if item.id not in breakdown:
        breakdown[item.id] = ItemMovement(item_id=item.id, item_name=item.name, item_unit=item.unit)
    return breakdown[item.id]


def analyze_stock_movement(items: Iterable, start, end) -> MovementAnalysis:
    """Aggregate tagged note lines dated within [start, end]. Never mutates items."""
    start, end = _check_range(start, end)
    breakdown: Dict[str, ItemMovement] = {}
    for item in items:
        for batch in item.batches or []:
            for entry in iter_ledger_entries(batch.notes):
                if start <= entry.date <= end:
                    _bucket(breakdown, item).add(entry.direction, entry.quantity)
    return _summarize(start, end, breakdown)


def analyze_recorded_movements(items: Iterable, movements: Optional[Iterable], start, end) -> MovementAnalysis:
    """Same aggregation over StockMovement rows. Movements default to each item's log."""
    start, end = _check_range(start, end)
    items = list(items)
    by_id = {item.id: item for item in items}
    if movements is None:
        movements = [movement for item in items for movement in item.movements]

    breakdown: Dict[str, ItemMovement] = {}
    for movement in movements:
        item = by_id.get(movement.item_id)
        if item is None or not (start <= movement.movement_date <= end):
            continue
        _bucket(breakdown, item).add(movement.direction, movement.quantity)
    return _summarize(start, end, breakdown)


__all__ = [
    'LedgerEntry',
    'parse_ledger_line',
    'iter_ledger_entries',
    'MovementSummary',
    'ItemMovement',
    'MovementAnalysis',
    'analyze_stock_movement',
    'analyze_recorded_movements',
]

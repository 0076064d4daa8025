"""
Depletion engine.

Plans which batches a deduction draws from and drains them. Planning is pure
and raises before anything is touched, so a request either drains exactly the
requested quantity or leaves every batch as it was.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence

from ._notes import append_note
from .errors import InsufficientStock, InvalidQuantity, ValidationError

logger = logging.getLogger(__name__)

NoteFormatter = Callable[[object, int, str], str]


class ReleaseStrategy(str, Enum):
    FEFO = 'FEFO'
    FIFO = 'FIFO'

    @classmethod
    def coerce(cls, value) -> "ReleaseStrategy":
        if isinstance(value, cls):
            return value
        if value is None or value == '':
            return cls.FEFO
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValidationError(f"Unknown release strategy: {value}") from None


@dataclass(frozen=True)
class Allocation:
    batch_id: str
    quantity: int

    def to_dict(self):
        return {'batch_id': self.batch_id, 'quantity': self.quantity}


def _fefo_key(batch):
    # Batches without an expiry sort after every dated batch
    expiry = batch.expiry_date
    return (expiry is None, expiry or date.max, batch.date_added or date.max)


def _fifo_key(batch):
    return batch.date_added or date.max


def order_batches(batches: Iterable, strategy=ReleaseStrategy.FEFO) -> List:
    """Candidate batches (quantity > 0) in the order a deduction drains them."""
    strategy = ReleaseStrategy.coerce(strategy)
    candidates = [batch for batch in batches if (batch.quantity or 0) > 0]
    key = _fefo_key if strategy is ReleaseStrategy.FEFO else _fifo_key
    return sorted(candidates, key=key)


def plan_depletion(batches: Sequence, requested_quantity: int, strategy=ReleaseStrategy.FEFO) -> List[Allocation]:
    """
    Allocate requested_quantity across batches without mutating them.

    Raises InsufficientStock when the stocked batches together hold less than
    the request. The allocations always sum to requested_quantity.
    """
    if requested_quantity is None or requested_quantity <= 0:
        raise InvalidQuantity("Quantity must be > 0.")

    ordered = order_batches(batches, strategy)
    available = sum(batch.quantity for batch in ordered)
    if available < requested_quantity:
        raise InsufficientStock(available=available, requested=requested_quantity)

    plan = []
    remaining = requested_quantity
    for batch in ordered:
        if remaining <= 0:
            break
        take = min(batch.quantity, remaining)
        plan.append(Allocation(batch_id=batch.id, quantity=take))
        remaining -= take

    return plan


def apply_depletion(batches: Sequence, plan: Sequence[Allocation], note_formatter: Optional[NoteFormatter], unit: str) -> List:
    """Drain each planned batch and append the formatter's line to its notes."""
    by_id = {batch.id: batch for batch in batches}

    # Check the whole plan first so a stale plan cannot half-apply
    for allocation in plan:
        batch = by_id.get(allocation.batch_id)
        if batch is None:
            raise InvalidQuantity(f"Batch {allocation.batch_id} is not part of this item.")
        if allocation.quantity <= 0 or allocation.quantity > batch.quantity:
            raise InsufficientStock(available=batch.quantity, requested=allocation.quantity)

    touched = []
    for allocation in plan:
        batch = by_id[allocation.batch_id]
        batch.quantity -= allocation.quantity
        if note_formatter is not None:
            batch.notes = append_note(batch.notes, note_formatter(batch, allocation.quantity, unit))
        touched.append(batch)
        logger.debug(f"DEPLETION: drained {allocation.quantity} {unit} from batch {batch.id}, {batch.quantity} left")

    return touched


def deplete(batches: Sequence, requested_quantity: int, strategy=ReleaseStrategy.FEFO,
            note_formatter: Optional[NoteFormatter] = None, unit: str = '') -> List[Allocation]:
    """Plan then apply; returns the plan that was applied."""
    plan = plan_depletion(batches, requested_quantity, strategy)
    apply_depletion(batches, plan, note_formatter, unit)
    return plan

"""Structured stock movement log.

Synopsis:
Append-only record of every tagged ledger line written into batch notes.
Movement analysis can read this table directly instead of re-parsing the
free-text notes.

Glossary:
- Direction: "in" for additions, "out" for consumption and releases.
- Kind: Operation key from the operation registry (e.g. "stock_release").
- Voucher: Reference shared by every line of one bulk release.
"""

from __future__ import annotations

from ..extensions import db
from ..utils.timezone_utils import TimezoneUtils


class StockMovement(db.Model):
    __tablename__ = "stock_movement"

    id = db.Column(db.Integer, primary_key=True)
    item_id = db.Column(
        db.String(16),
        db.ForeignKey("stock_item.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    batch_id = db.Column(db.String(16), nullable=False)

    kind = db.Column(db.String(32), nullable=False, index=True)
    direction = db.Column(db.String(3), nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False)
    movement_date = db.Column(db.Date, nullable=False, index=True)

    voucher_id = db.Column(db.String(64), nullable=True, index=True)
    recipient = db.Column(db.String(255), nullable=True)
    reason = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), default=TimezoneUtils.utc_now, nullable=False)

    item = db.relationship("StockItem", back_populates="movements")

    __table_args__ = (
        db.CheckConstraint("quantity >= 0", name="check_movement_quantity_non_negative"),
        db.CheckConstraint("direction IN ('in', 'out')", name="check_movement_direction"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "item_id": self.item_id,
            "batch_id": self.batch_id,
            "kind": self.kind,
            "direction": self.direction,
            "quantity": self.quantity,
            "movement_date": TimezoneUtils.format_date(self.movement_date),
            "voucher_id": self.voucher_id,
            "recipient": self.recipient,
            "reason": self.reason,
        }

    def __repr__(self) -> str:
        return f"<StockMovement {self.kind} {self.direction} {self.quantity} item={self.item_id}>"

from ..extensions import db
from ..services.batch_ledger import is_expired, soonest_expiry, total_quantity
from ..utils.timezone_utils import TimezoneUtils


class StockItem(db.Model):
    """
    A stocked supply. Available quantity lives only on its batches;
    the item total is always computed.
    """
    __tablename__ = 'stock_item'

    id = db.Column(db.String(16), primary_key=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    category = db.Column(db.String(64), nullable=False, index=True)
    unit = db.Column(db.String(32), nullable=False)
    min_threshold = db.Column(db.Integer, nullable=False, default=0)
    last_updated = db.Column(db.Date, nullable=False, default=TimezoneUtils.today)
    notes = db.Column(db.Text, nullable=True)
    origin_country = db.Column(db.String(128), nullable=True)

    batches = db.relationship(
        'StockBatch',
        back_populates='item',
        cascade='all, delete-orphan',
        order_by='StockBatch.pk',
    )
    movements = db.relationship(
        'StockMovement',
        back_populates='item',
        cascade='all, delete-orphan',
        order_by='StockMovement.id',
    )

    __table_args__ = (
        db.CheckConstraint('min_threshold >= 0', name='check_min_threshold_non_negative'),
    )

    @property
    def total_quantity(self) -> int:
        return total_quantity(self)

    @property
    def soonest_expiry(self):
        return soonest_expiry(self)

    def get_batch(self, batch_id):
        for batch in self.batches:
            if batch.id == batch_id:
                return batch
        return None

    def to_dict(self, include_batches: bool = True) -> dict:
        data = {
            'id': self.id,
            'name': self.name,
            'category': self.category,
            'unit': self.unit,
            'min_threshold': self.min_threshold,
            'last_updated': TimezoneUtils.format_date(self.last_updated),
            'notes': self.notes,
            'origin_country': self.origin_country,
            'total_quantity': self.total_quantity,
            'soonest_expiry': TimezoneUtils.format_date(self.soonest_expiry),
        }
        if include_batches:
            data['batches'] = [batch.to_dict() for batch in self.batches]
        return data

    def __repr__(self):
        return f'<StockItem {self.id}: {self.name}>'


class StockBatch(db.Model):
    """
    A dated batch of one item. Depleted batches are kept at zero as history.
    """
    __tablename__ = 'stock_batch'

    pk = db.Column(db.Integer, primary_key=True)
    item_id = db.Column(
        db.String(16),
        db.ForeignKey('stock_item.id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    # Unique within the owning item only
    id = db.Column(db.String(16), nullable=False)

    quantity = db.Column(db.Integer, nullable=False, default=0)
    expiry_date = db.Column(db.Date, nullable=True)
    date_added = db.Column(db.Date, nullable=False, default=TimezoneUtils.today)
    supplier = db.Column(db.String(255), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    item = db.relationship('StockItem', back_populates='batches')

    __table_args__ = (
        db.UniqueConstraint('item_id', 'id', name='uq_stock_batch_item_batch_id'),
        db.CheckConstraint('quantity >= 0', name='check_batch_quantity_non_negative'),
    )

    @property
    def is_expired(self):
        return is_expired(self)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'quantity': self.quantity,
            'expiry_date': TimezoneUtils.format_date(self.expiry_date),
            'date_added': TimezoneUtils.format_date(self.date_added),
            'supplier': self.supplier,
            'notes': self.notes,
            'is_expired': self.is_expired,
        }

    def __repr__(self):
        return f'<StockBatch {self.item_id}/{self.id}: {self.quantity}>'

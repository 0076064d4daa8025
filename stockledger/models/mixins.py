from ..extensions import db
from ..utils.timezone_utils import TimezoneUtils


class TimestampMixin:
    """Adds created_at and updated_at timestamps to models"""
    created_at = db.Column(db.DateTime(timezone=True), default=TimezoneUtils.utc_now, nullable=False)
    updated_at = db.Column(
        db.DateTime(timezone=True),
        default=TimezoneUtils.utc_now,
        onupdate=TimezoneUtils.utc_now,
        nullable=False,
    )

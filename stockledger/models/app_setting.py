"""Application settings persistence model.

Synopsis:
Key/value store for application-level flags such as the seed-data sentinel.

Glossary:
- Setting key: Unique identifier used to retrieve a configuration value.
- JSON value: Serialized configuration payload stored for a setting key.
"""

from __future__ import annotations

from ..extensions import db
from .mixins import TimestampMixin


# --- AppSetting model ---
# Purpose: Store key/value runtime flags.
# Inputs: Unique setting key plus JSON value/optional description.
# Outputs: Persisted application setting row.
class AppSetting(TimestampMixin, db.Model):
    __tablename__ = "app_setting"

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(128), unique=True, nullable=False, index=True)
    value = db.Column(db.JSON, nullable=True)
    description = db.Column(db.String(255), nullable=True)

    @classmethod
    def get_value(cls, key: str, default=None):
        setting = cls.query.filter_by(key=key).first()
        return setting.value if setting is not None else default

    @classmethod
    def set_value(cls, key: str, value, description: str | None = None) -> "AppSetting":
        """Upsert a setting row. The caller owns the commit."""
        setting = cls.query.filter_by(key=key).first()
        if setting is None:
            setting = cls(key=key)
            db.session.add(setting)
        setting.value = value
        if description is not None:
            setting.description = description
        return setting

    def __repr__(self) -> str:
        return f"<AppSetting {self.key}>"

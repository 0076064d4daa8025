from __future__ import annotations

from datetime import date, datetime, timezone as dt_timezone

import pytz
from flask import current_app, has_app_context

DEFAULT_TIMEZONE = "UTC"
ISO_DATE_FORMAT = "%Y-%m-%d"


class TimezoneUtils:
    """Utilities for consistent date and timezone handling across the application."""

    @staticmethod
    def validate_timezone(tz_name: str | None) -> bool:
        """Return True when tz_name is a known pytz timezone."""
        return bool(tz_name) and tz_name in pytz.all_timezones_set

    @staticmethod
    def get_stock_timezone() -> str:
        """Timezone that defines the calendar day for stock operations."""
        if has_app_context():
            configured = current_app.config.get("STOCK_TIMEZONE")
            if TimezoneUtils.validate_timezone(configured):
                return configured
        return DEFAULT_TIMEZONE

    @staticmethod
    def utc_now() -> datetime:
        """Timezone-aware current UTC time."""
        return datetime.now(dt_timezone.utc)

    @staticmethod
    def now() -> datetime:
        """Current time localized to the stock timezone."""
        target = pytz.timezone(TimezoneUtils.get_stock_timezone())
        return TimezoneUtils.utc_now().astimezone(target)

    @staticmethod
    def today() -> date:
        """Calendar date in the stock timezone (no time component)."""
        return TimezoneUtils.now().date()

    @staticmethod
    def parse_date(value) -> date | None:
        """
        Coerce a YYYY-MM-DD string, date or datetime into a date.

        Blank values return None. Anything else that is not a calendar date
        raises ValueError.
        """
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        text = str(value).strip()
        if not text:
            return None
        # Accept full ISO timestamps by keeping only the date part
        return datetime.strptime(text[:10], ISO_DATE_FORMAT).date()

    @staticmethod
    def format_date(value: date | None) -> str | None:
        if value is None:
            return None
        return value.strftime(ISO_DATE_FORMAT)

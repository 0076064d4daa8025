from datetime import date, datetime

import pytest

from stockledger import create_app
from stockledger.utils.timezone_utils import TimezoneUtils


def test_parse_date_accepts_common_shapes():
    assert TimezoneUtils.parse_date('2025-03-01') == date(2025, 3, 1)
    assert TimezoneUtils.parse_date('2025-03-01T23:59:00Z') == date(2025, 3, 1)
    assert TimezoneUtils.parse_date(datetime(2025, 3, 1, 8, 30)) == date(2025, 3, 1)
    assert TimezoneUtils.parse_date(date(2025, 3, 1)) == date(2025, 3, 1)
    assert TimezoneUtils.parse_date('  ') is None
    assert TimezoneUtils.parse_date(None) is None


def test_parse_date_rejects_impossible_dates():
    with pytest.raises(ValueError):
        TimezoneUtils.parse_date('2025-02-30')


def test_utc_now_is_timezone_aware():
    assert TimezoneUtils.utc_now().tzinfo is not None


def test_stock_timezone_follows_config(app):
    with app.app_context():
        assert TimezoneUtils.get_stock_timezone() == 'UTC'

    other = create_app({'TESTING': True, 'DATABASE_URL': 'sqlite:///:memory:',
                        'STOCK_AUTO_SEED': False, 'STOCK_TIMEZONE': 'Asia/Kolkata'})
    with other.app_context():
        assert TimezoneUtils.get_stock_timezone() == 'Asia/Kolkata'


def test_invalid_timezone_falls_back_to_utc():
    assert not TimezoneUtils.validate_timezone('Mars/Olympus')
    assert TimezoneUtils.validate_timezone('Europe/Berlin')

import logging

from stockledger.config import EnvReader, database_url
from stockledger.logging_config import RedactingFilter, redact


def test_env_reader_falls_back_with_warnings():
    reader = EnvReader({
        'STOCK_EXPIRING_SOON_DAYS': 'soon',
        'STOCK_AUTO_SEED': 'maybe',
        'STOCK_TIMEZONE': 'Mars/Olympus',
        'FLASK_ENV': 'staging',
    })
    assert reader.integer('STOCK_EXPIRING_SOON_DAYS', 30) == 30
    assert reader.flag('STOCK_AUTO_SEED', True) is True
    assert reader.timezone('STOCK_TIMEZONE') == 'UTC'
    assert reader.environment() == 'development'
    assert len(reader.warnings) == 4


def test_env_reader_reads_valid_values():
    reader = EnvReader({
        'STOCK_EXPIRING_SOON_DAYS': ' 14 ',
        'STOCK_AUTO_SEED': 'off',
        'STOCK_TIMEZONE': 'Europe/Berlin',
        'FLASK_ENV': 'Production',
        'LOG_LEVEL': '',
    })
    assert reader.integer('STOCK_EXPIRING_SOON_DAYS', 30) == 14
    assert reader.flag('STOCK_AUTO_SEED', True) is False
    assert reader.timezone('STOCK_TIMEZONE') == 'Europe/Berlin'
    assert reader.environment() == 'production'
    assert reader.text('LOG_LEVEL', 'INFO') == 'INFO'
    assert reader.warnings == []


def test_database_url_normalizes_postgres_scheme():
    reader = EnvReader({'DATABASE_URL': 'postgres://u:p@db/stock'})
    assert database_url(reader) == 'postgresql://u:p@db/stock'
    assert database_url(EnvReader({})) is None


def test_redaction_hides_contacts_and_secrets():
    message = redact('Released to nurse@example.org with token=abc123 on 2025-03-01')
    assert 'nurse@example.org' not in message
    assert 'abc123' not in message
    assert '2025-03-01' in message


def test_redacting_filter_flattens_args():
    record = logging.LogRecord('stockledger', logging.INFO, __file__, 1, 'to %s', ('ward@example.org',), None)
    assert RedactingFilter().filter(record) is True
    assert record.msg == 'to [email]'
    assert record.args is None

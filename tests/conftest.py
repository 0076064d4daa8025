"""
Pytest configuration and shared fixtures for stock ledger tests.
"""
import os
import tempfile
from datetime import date

import pytest

from stockledger import create_app
from stockledger.extensions import db
from stockledger.repositories import SqlAlchemyStockRepository
from stockledger.services.stock_adjustment import create_stock_item


@pytest.fixture(scope='function')
def app():
    """Create and configure a new app instance for each test."""
    # Create a temporary file to use as the database
    db_fd, db_path = tempfile.mkstemp()

    app = create_app({
        'TESTING': True,
        'DATABASE_URL': f'sqlite:///{db_path}',
        'SECRET_KEY': 'test-secret-key',
        'STOCK_AUTO_SEED': False,
        'STOCK_TIMEZONE': 'UTC',
    })

    with app.app_context():
        db.create_all()

    yield app

    # Clean up database
    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()

    os.close(db_fd)
    os.unlink(db_path)


@pytest.fixture
def client(app):
    """A test client for the app."""
    return app.test_client()


@pytest.fixture
def runner(app):
    """A test runner for the app's Click commands."""
    return app.test_cli_runner()


@pytest.fixture
def repository(app):
    """Repository bound to the session of the active app context."""
    def _build():
        return SqlAlchemyStockRepository(db.session)
    return _build


@pytest.fixture
def make_item():
    """Factory creating an item through the service. Call inside an app context."""
    def _make(name='Scalpel Blades #10', quantity=10, unit='box', category='Operation Theatre',
              min_threshold=0, expiry_date=None, today=date(2025, 1, 1), notes=None, supplier=None):
        return create_stock_item(
            name=name,
            category=category,
            unit=unit,
            min_threshold=min_threshold,
            first_batch={
                'quantity': quantity,
                'expiry_date': expiry_date,
                'supplier': supplier,
                'notes': notes,
            },
            today=today,
        )
    return _make

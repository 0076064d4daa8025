"""
Seeders package for the stock ledger.
Contains the demonstration stock data loaded on first start.
"""

from .stock_seeder import SEED_SENTINEL_KEY, seed_initial_stock

__all__ = [
    'SEED_SENTINEL_KEY',
    'seed_initial_stock',
]

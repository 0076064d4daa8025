from ..extensions import db
from .app_setting import AppSetting
from .category import ItemCategory, UNIT_OPTIONS
from .stock_item import StockItem, StockBatch
from .stock_movement import StockMovement

__all__ = [
    'db',
    'AppSetting',
    'ItemCategory',
    'UNIT_OPTIONS',
    'StockItem',
    'StockBatch',
    'StockMovement',
]

from .stock_repository import StockRepository, SqlAlchemyStockRepository, default_repository

__all__ = ['StockRepository', 'SqlAlchemyStockRepository', 'default_repository']

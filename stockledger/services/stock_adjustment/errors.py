"""Error taxonomy for stock ledger operations."""


class StockLedgerError(RuntimeError):
    """Base class for every stock ledger failure surfaced to callers."""


class ItemNotFound(StockLedgerError):
    def __init__(self, item_id):
        self.item_id = item_id
        super().__init__(f"Item {item_id} not found.")


class InvalidQuantity(StockLedgerError):
    pass


class InsufficientStock(InvalidQuantity):
    def __init__(self, available: int, requested: int):
        self.available = available
        self.requested = requested
        super().__init__(f"Not enough stock. Available: {available}, Requested: {requested}")


class ValidationError(StockLedgerError):
    pass


class StorageError(StockLedgerError):
    """Wraps a database failure; the original exception is chained."""


__all__ = [
    "StockLedgerError",
    "ItemNotFound",
    "InvalidQuantity",
    "InsufficientStock",
    "ValidationError",
    "StorageError",
]

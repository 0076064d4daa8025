import logging
from functools import wraps
from typing import Any, Dict, List, Optional

from flask import Response, jsonify

from ..services.stock_adjustment.errors import ItemNotFound, StockLedgerError, StorageError

logger = logging.getLogger(__name__)


class APIResponse:
    """JSON envelope shared by every API route: {success, message, data|errors}."""

    @staticmethod
    def success(data: Any = None, message: str = "Success", status_code: int = 200) -> Response:
        return jsonify({'success': True, 'message': message, 'data': data}), status_code

    @staticmethod
    def error(message: str, errors: Optional[Dict] = None, status_code: int = 400) -> Response:
        return jsonify({'success': False, 'message': message, 'errors': errors or {}}), status_code

    @staticmethod
    def validation_error(errors: Dict[str, List[str]], message: str = "Validation failed") -> Response:
        return APIResponse.error(message, errors=errors, status_code=422)


def api_route(func):
    """Translate stock ledger errors raised by a route into JSON error responses."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ItemNotFound as e:
            return APIResponse.error(str(e), errors={'item_id': [str(e.item_id)]}, status_code=404)
        except StorageError as e:
            logger.error(f"STORAGE ERROR in {func.__name__}: {e}")
            return APIResponse.error("Storage failure", errors={'general': [str(e)]}, status_code=500)
        except StockLedgerError as e:
            return APIResponse.validation_error({'general': [str(e)]}, message=str(e))

    return wrapper


def api_error(message: str, status_code: int = 400, **kwargs) -> Response:
    return APIResponse.error(message, status_code=status_code, **kwargs)


def api_success(data: Any = None, message: str = "Success", **kwargs) -> Response:
    return APIResponse.success(data, message=message, **kwargs)


__all__ = ['APIResponse', 'api_route', 'api_error', 'api_success']

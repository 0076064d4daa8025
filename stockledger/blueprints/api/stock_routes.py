from flask import Blueprint, current_app, request

from ...extensions import db
from ...models.category import UNIT_OPTIONS, get_category_options
from ...repositories import SqlAlchemyStockRepository
from ...services.bulk_stock_service import BulkStockService
from ...services.movement_analysis import analyze_recorded_movements, analyze_stock_movement
from ...services.stock_adjustment import (
    EDITABLE_FIELDS,
    add_stock_batch,
    create_stock_item,
    delete_stock_item,
    get_stock_item,
    record_stock_out,
    record_stock_release,
    update_stock_item,
)
from ...services.stock_alerts import get_stock_overview
from ...services.stock_search import search_stock_items
from ...utils.api_responses import api_error, api_route, api_success

stock_api_bp = Blueprint('stock_api', __name__)


def _repository():
    return SqlAlchemyStockRepository(db.session)


def _json_body():
    """Return the JSON object body, or None when the body is not a JSON object."""
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else None


def _malformed():
    return api_error("Request body must be a JSON object.", status_code=400)


def _allocations(plan):
    return [allocation.to_dict() for allocation in plan]


# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------

@stock_api_bp.route('/items', methods=['GET'])
@api_route
def list_items():
    items = search_stock_items(
        _repository().get_all(),
        search_term=request.args.get('search', ''),
        category=request.args.get('category'),
    )
    return api_success([item.to_dict() for item in items])


@stock_api_bp.route('/items', methods=['POST'])
@api_route
def create_item():
    data = _json_body()
    if data is None:
        return _malformed()
    first_batch = data.get('first_batch')
    if first_batch is not None and not isinstance(first_batch, dict):
        return _malformed()
    item = create_stock_item(
        name=data.get('name'),
        category=data.get('category'),
        unit=data.get('unit'),
        min_threshold=data.get('min_threshold', 0),
        first_batch=first_batch,
        notes=data.get('notes'),
        origin_country=data.get('origin_country'),
        repository=_repository(),
    )
    return api_success(item.to_dict(), message=f'Item "{item.name}" created', status_code=201)


@stock_api_bp.route('/items/<item_id>', methods=['GET'])
@api_route
def get_item(item_id):
    item = get_stock_item(item_id, repository=_repository())
    return api_success(item.to_dict())


@stock_api_bp.route('/items/<item_id>', methods=['PUT'])
@api_route
def update_item(item_id):
    data = _json_body()
    if data is None:
        return _malformed()
    # Read-only fields (id, batches, totals) may come back from a client round trip
    fields = {key: value for key, value in data.items() if key in EDITABLE_FIELDS}
    item = update_stock_item(item_id, repository=_repository(), **fields)
    return api_success(item.to_dict(), message=f'Item "{item.name}" updated')


@stock_api_bp.route('/items/<item_id>', methods=['DELETE'])
@api_route
def delete_item(item_id):
    delete_stock_item(item_id, repository=_repository())
    return api_success({'id': item_id}, message='Item deleted')


# ---------------------------------------------------------------------------
# Batch operations
# ---------------------------------------------------------------------------

@stock_api_bp.route('/items/<item_id>/batches', methods=['POST'])
@api_route
def add_batch(item_id):
    data = _json_body()
    if data is None:
        return _malformed()
    item = add_stock_batch(
        item_id,
        data.get('quantity'),
        expiry_date=data.get('expiry_date'),
        supplier=data.get('supplier'),
        notes=data.get('notes'),
        repository=_repository(),
    )
    return api_success(item.to_dict(), message='Batch added', status_code=201)


@stock_api_bp.route('/items/<item_id>/stock-out', methods=['POST'])
@api_route
def stock_out(item_id):
    data = _json_body()
    if data is None:
        return _malformed()
    item, plan = record_stock_out(
        item_id,
        data.get('quantity'),
        data.get('reason'),
        consumption_date=data.get('consumption_date'),
        repository=_repository(),
    )
    return api_success(
        {'item': item.to_dict(), 'allocations': _allocations(plan)},
        message=f'Stock out recorded. New total quantity: {item.total_quantity}',
    )


@stock_api_bp.route('/items/<item_id>/release', methods=['POST'])
@api_route
def release(item_id):
    data = _json_body()
    if data is None:
        return _malformed()
    item, plan = record_stock_release(
        item_id,
        data.get('quantity'),
        data.get('released_to'),
        reason=data.get('reason'),
        release_date=data.get('release_date'),
        strategy=data.get('strategy'),
        repository=_repository(),
    )
    return api_success(
        {'item': item.to_dict(), 'allocations': _allocations(plan)},
        message=f'Stock released. New total quantity: {item.total_quantity}',
    )


# ---------------------------------------------------------------------------
# Bulk operations
# ---------------------------------------------------------------------------

@stock_api_bp.route('/bulk/release', methods=['POST'])
@api_route
def bulk_release():
    data = _json_body()
    if data is None or not isinstance(data.get('items', []), list):
        return _malformed()
    result = BulkStockService(repository=_repository()).process_bulk_release(
        data.get('released_to'),
        data.get('items', []),
        reason=data.get('reason'),
        release_date=data.get('release_date'),
        strategy=data.get('strategy'),
    )
    message = 'Bulk release completed' if result.success else 'Bulk release completed with errors'
    return api_success(result.to_dict(), message=message)


@stock_api_bp.route('/bulk/add', methods=['POST'])
@api_route
def bulk_add():
    data = _json_body()
    if data is None or not isinstance(data.get('items', []), list):
        return _malformed()
    result = BulkStockService(repository=_repository()).process_bulk_add(data.get('items', []))
    message = 'Bulk add completed' if result.success else 'Bulk add completed with errors'
    return api_success(result.to_dict(), message=message)


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------

@stock_api_bp.route('/analysis/movements', methods=['GET'])
@api_route
def movement_analysis():
    start = request.args.get('start')
    end = request.args.get('end')
    source = (request.args.get('source') or 'notes').lower()
    repository = _repository()
    items = repository.get_all()

    if source == 'notes':
        analysis = analyze_stock_movement(items, start, end)
    elif source == 'ledger':
        analysis = analyze_recorded_movements(items, repository.get_movements(), start, end)
    else:
        return api_error("source must be 'notes' or 'ledger'", status_code=400)
    return api_success(analysis.to_dict())


@stock_api_bp.route('/analysis/overview', methods=['GET'])
@api_route
def stock_overview():
    overview = get_stock_overview(
        _repository().get_all(),
        expiring_within_days=current_app.config.get('STOCK_EXPIRING_SOON_DAYS', 30),
    )
    return api_success(overview)


@stock_api_bp.route('/options', methods=['GET'])
@api_route
def options():
    return api_success({'categories': get_category_options(), 'units': UNIT_OPTIONS})

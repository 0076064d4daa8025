import calendar
import logging
from datetime import timedelta

from ..extensions import db
from ..models import AppSetting
from ..services.stock_adjustment import add_stock_batch, create_stock_item
from ..services.stock_adjustment._core import resolve_repository
from ..utils.timezone_utils import TimezoneUtils

logger = logging.getLogger(__name__)

SEED_SENTINEL_KEY = 'stock_seed_loaded'


def _add_months(value, months):
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def _seed_items(today):
    one_year = _add_months(today, 12)
    six_months = _add_months(today, 6)
    two_years = today + timedelta(days=730)

    return [
        {
            'name': 'Scalpel Blades #10',
            'category': 'Operation Theatre',
            'unit': 'box',
            'min_threshold': 10,
            'origin_country': 'Germany',
            'notes': 'Standard surgical blades.',
            'batches': [
                {'quantity': 30, 'supplier': 'MediSupply Co.', 'added': today - timedelta(days=10),
                 'expiry_date': one_year, 'notes': 'Lot A123'},
                {'quantity': 20, 'supplier': 'MediSupply Co.', 'added': today - timedelta(days=5),
                 'expiry_date': six_months, 'notes': 'Lot B456'},
            ],
        },
        {
            'name': 'EndoSheath Protective Cover',
            'category': 'Endoscopy',
            'unit': 'pieces',
            'min_threshold': 5,
            'origin_country': 'USA',
            'batches': [
                {'quantity': 30, 'supplier': 'EndoWorld', 'added': today,
                 'expiry_date': one_year, 'notes': 'For flexible endoscopes P/N 789'},
            ],
        },
        {
            'name': 'Gauze Swabs 4x4',
            'category': 'General Supplies',
            'unit': 'packs',
            'min_threshold': 50,
            'origin_country': 'China',
            'batches': [
                {'quantity': 200, 'added': today},
            ],
        },
        {
            'name': 'Propofol 200mg/20ml',
            'category': 'Pharmaceuticals',
            'unit': 'vials',
            'min_threshold': 5,
            'batches': [
                {'quantity': 10, 'supplier': 'PharmaDirect', 'added': today - timedelta(days=20),
                 'expiry_date': six_months, 'notes': 'Batch PPL-001'},
                {'quantity': 10, 'supplier': 'PharmaDirect', 'added': today - timedelta(days=15),
                 'expiry_date': two_years, 'notes': 'Batch PPL-002'},
            ],
        },
    ]


def seed_initial_stock(force=False, today=None, repository=None):
    """Load the demonstration items once. Returns the number of items created.

    Each item commits on its own, so a run that stopped partway leaves some
    items behind. Without force, items whose name is already stocked are
    skipped and a rerun only creates the missing ones.
    """
    if AppSetting.get_value(SEED_SENTINEL_KEY) and not force:
        logger.info("STOCK SEED: already loaded, skipping")
        return 0

    today = today or TimezoneUtils.today()
    repository = resolve_repository(repository)
    existing = set() if force else {item.name for item in repository.get_all()}
    created = 0
    for data in _seed_items(today):
        if data['name'] in existing:
            logger.info(f"STOCK SEED: {data['name']} already stocked, skipping")
            continue
        first, *rest = data['batches']
        item = create_stock_item(
            name=data['name'],
            category=data['category'],
            unit=data['unit'],
            min_threshold=data['min_threshold'],
            first_batch=first,
            notes=data.get('notes'),
            origin_country=data.get('origin_country'),
            repository=repository,
            today=first['added'],
        )
        for batch in rest:
            add_stock_batch(
                item.id,
                batch['quantity'],
                expiry_date=batch.get('expiry_date'),
                supplier=batch.get('supplier'),
                notes=batch.get('notes'),
                repository=repository,
                today=batch['added'],
            )
        created += 1

    AppSetting.set_value(SEED_SENTINEL_KEY, True, description='Demonstration stock has been loaded')
    db.session.commit()
    logger.info(f"STOCK SEED: created {created} items")
    return created

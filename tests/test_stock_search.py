from datetime import date
from types import SimpleNamespace

from stockledger.services.stock_search import search_stock_items


def _item(name, category, updated):
    return SimpleNamespace(name=name, category=category, last_updated=updated)


ITEMS = [
    _item('Scalpel Blades #10', 'Operation Theatre', date(2025, 1, 5)),
    _item('EndoSheath Protective Cover', 'Endoscopy', date(2025, 2, 1)),
    _item('Scalpel Handle', 'Instruments', date(2025, 3, 1)),
]


def test_search_is_case_insensitive_and_sorted_newest_first():
    result = search_stock_items(ITEMS, 'scalpel')
    assert [item.name for item in result] == ['Scalpel Handle', 'Scalpel Blades #10']


def test_category_filter():
    result = search_stock_items(ITEMS, '', 'Endoscopy')
    assert [item.name for item in result] == ['EndoSheath Protective Cover']


def test_blank_filters_return_everything():
    assert len(search_stock_items(ITEMS)) == 3
    assert len(search_stock_items(ITEMS, '  ', '')) == 3

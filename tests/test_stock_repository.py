from datetime import date

from stockledger.services.stock_adjustment import add_stock_batch


def test_get_all_orders_by_name(app, make_item, repository):
    with app.app_context():
        make_item(name='Propofol 200mg/20ml')
        make_item(name='EndoSheath Protective Cover')
        names = [item.name for item in repository().get_all()]
        assert names == ['EndoSheath Protective Cover', 'Propofol 200mg/20ml']


def test_get_by_id_missing_returns_none(app, repository):
    with app.app_context():
        assert repository().get_by_id('missing') is None
        assert repository().get_by_id('') is None


def test_get_movements_filters_by_item_and_date(app, make_item, repository):
    with app.app_context():
        a = make_item(name='A', quantity=1, today=date(2025, 1, 1))
        add_stock_batch(a.id, 2, today=date(2025, 2, 1))
        b = make_item(name='B', quantity=3, today=date(2025, 2, 1))

        repo = repository()
        assert [m.quantity for m in repo.get_movements(item_id=a.id)] == [1, 2]
        february = repo.get_movements(start=date(2025, 2, 1), end=date(2025, 2, 28))
        assert sorted((m.item_id, m.quantity) for m in february) == sorted([(a.id, 2), (b.id, 3)])

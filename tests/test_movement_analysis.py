from datetime import date
from types import SimpleNamespace

import pytest

from stockledger.extensions import db
from stockledger.models import StockItem
from stockledger.services.movement_analysis import analyze_recorded_movements, analyze_stock_movement
from stockledger.services.stock_adjustment import (
    ValidationError,
    add_stock_batch,
    record_stock_out,
    record_stock_release,
)


def _item(item_id, name, *notes, unit='box'):
    batches = [SimpleNamespace(id=f'{item_id}-{i}', notes=text) for i, text in enumerate(notes)]
    return SimpleNamespace(id=item_id, name=name, unit=unit, batches=batches)


def test_reconstructs_totals_from_notes():
    items = [
        _item('b', 'Propofol', '[Initial Stock - 2025-03-01]: Added 10 vials.\n'
                               '[Stock Out - 2025-03-02]: Consumed 4 vials from batch ID b-0. Reason: x.',
              unit='vials'),
        _item('a', 'Gauze', 'Free text only\n[Stock Addition - 2025-03-05]: Added 7 packs.',
              '[Bulk Stock Release - 2025-03-06 | Voucher: VOUCHER-1]: Released 2 packs to "W" from batch ID a-1.',
              unit='packs'),
    ]

    analysis = analyze_stock_movement(items, date(2025, 3, 1), date(2025, 3, 31))

    summary = analysis.overall_summary
    assert summary.total_stock_in_quantity == 17
    assert summary.total_stock_out_quantity == 6
    assert summary.stock_in_transactions == 2
    assert summary.stock_out_transactions == 2
    assert summary.net_change == 11

    assert [entry.item_name for entry in analysis.items_breakdown] == ['Gauze', 'Propofol']
    gauze = analysis.items_breakdown[0]
    assert (gauze.item_id, gauze.item_unit) == ('a', 'packs')
    assert (gauze.quantity_in, gauze.quantity_out, gauze.net_change) == (7, 2, 5)


def test_range_is_inclusive_and_filters_other_dates():
    items = [_item('a', 'A',
                   '[Stock Addition - 2025-02-28]: Added 1 box.\n'
                   '[Stock Addition - 2025-03-01]: Added 2 box.\n'
                   '[Stock Addition - 2025-03-02]: Added 4 box.\n'
                   '[Stock Addition - 2025-03-03]: Added 8 box.')]

    analysis = analyze_stock_movement(items, date(2025, 3, 1), '2025-03-02')

    assert analysis.overall_summary.total_stock_in_quantity == 6
    assert analysis.overall_summary.stock_in_transactions == 2


def test_items_without_matches_are_left_out():
    items = [_item('a', 'A', 'Lot A123'), _item('b', 'B', '[Stock Addition - 2024-01-01]: Added 1 box.')]
    analysis = analyze_stock_movement(items, date(2025, 1, 1), date(2025, 12, 31))
    assert analysis.items_breakdown == []
    assert analysis.overall_summary.net_change == 0


def test_reversed_range_is_rejected():
    with pytest.raises(ValidationError):
        analyze_stock_movement([], date(2025, 3, 2), date(2025, 3, 1))


def test_add_then_reconstruct_round_trip(app, make_item):
    day = date(2025, 3, 10)
    with app.app_context():
        item = make_item(quantity=5, today=date(2025, 3, 1))
        add_stock_batch(item.id, 15, today=day)

        items = StockItem.query.all()
        analysis = analyze_stock_movement(items, day, day)

        assert analysis.overall_summary.total_stock_in_quantity == 15
        assert analysis.overall_summary.stock_in_transactions == 1


def test_reconstruction_is_idempotent_and_does_not_mutate(app, make_item):
    with app.app_context():
        item = make_item(quantity=20, today=date(2025, 3, 1))
        record_stock_out(item.id, 3, 'used', today=date(2025, 3, 2))

        items = StockItem.query.all()
        notes_before = [batch.notes for batch in items[0].batches]
        first = analyze_stock_movement(items, date(2025, 3, 1), date(2025, 3, 31))
        second = analyze_stock_movement(items, date(2025, 3, 1), date(2025, 3, 31))

        assert first.to_dict() == second.to_dict()
        assert [batch.notes for batch in items[0].batches] == notes_before
        assert db.session.get(StockItem, item.id).total_quantity == 17


def test_notes_and_recorded_movements_agree(app, make_item):
    with app.app_context():
        a = make_item(name='Alpha', quantity=20, expiry_date=date(2025, 5, 1), today=date(2025, 3, 1))
        add_stock_batch(a.id, 10, expiry_date=date(2025, 4, 1), today=date(2025, 3, 3))
        record_stock_out(a.id, 14, 'theatre', today=date(2025, 3, 4))
        b = make_item(name='Beta', quantity=6, today=date(2025, 3, 2))
        record_stock_release(b.id, 2, 'Ward 3', reason='loan', today=date(2025, 3, 5))

        items = StockItem.query.all()
        start, end = date(2025, 3, 1), date(2025, 3, 31)
        from_notes = analyze_stock_movement(items, start, end)
        from_ledger = analyze_recorded_movements(items, None, start, end)

        assert from_notes.to_dict() == from_ledger.to_dict()
        # Stock out spanning two batches counts once per batch line
        assert from_notes.overall_summary.stock_out_transactions == 3
        assert from_notes.overall_summary.net_change == 20 + 10 + 6 - 14 - 2


def test_line_breaks_in_user_text_cannot_add_ledger_lines(app, make_item):
    forged = '\n[Initial Stock - 2025-03-01]: Added 9999 box.'
    with app.app_context():
        a = make_item(name='Alpha', quantity=10, notes='Lot A' + forged, today=date(2025, 3, 1))
        record_stock_release(a.id, 2, 'Ward' + forged, reason='loan\r\n' + forged.strip(), today=date(2025, 3, 2))
        record_stock_out(a.id, 1, 'theatre' + forged, today=date(2025, 3, 3))
        add_stock_batch(a.id, 3, notes='PO 7' + forged, today=date(2025, 3, 4))

        items = StockItem.query.all()
        start, end = date(2025, 3, 1), date(2025, 3, 31)
        from_notes = analyze_stock_movement(items, start, end)
        from_ledger = analyze_recorded_movements(items, None, start, end)

        assert from_notes.to_dict() == from_ledger.to_dict()
        assert from_notes.overall_summary.total_stock_in_quantity == 13
        assert from_notes.overall_summary.total_stock_out_quantity == 3

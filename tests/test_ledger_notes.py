from datetime import date

import pytest

from stockledger.services.stock_adjustment._notes import (
    append_note,
    format_addition_note,
    format_release_note,
    format_stock_out_note,
    has_additive_tag,
)
from stockledger.services.movement_analysis import parse_ledger_line

D = date(2025, 3, 14)


def test_addition_note_is_trimmed_without_text():
    assert format_addition_note('initial_stock', D, 200, 'packs') == '[Initial Stock - 2025-03-14]: Added 200 packs.'


def test_addition_note_keeps_free_text():
    note = format_addition_note('stock_addition', D, 20, 'box', '  Lot B456 ')
    assert note == '[Stock Addition - 2025-03-14]: Added 20 box. Lot B456'


def test_addition_note_rejects_deductive_kind():
    with pytest.raises(ValueError):
        format_addition_note('stock_out', D, 1, 'box')


def test_stock_out_note():
    note = format_stock_out_note(D, 'abc123', 5, 'vials', 'Theatre 2')
    assert note == '[Stock Out - 2025-03-14]: Consumed 5 vials from batch ID abc123. Reason: Theatre 2.'


def test_release_note_omits_missing_reason():
    note = format_release_note(D, 'abc123', 3, 'box', 'Ward 7')
    assert note == '[Stock Release - 2025-03-14]: Released 3 box to "Ward 7" from batch ID abc123.'


def test_bulk_release_note_carries_voucher():
    note = format_release_note(D, 'abc123', 3, 'box', 'Ward 7', 'Restock', voucher_id='VOUCHER-1700000000000')
    assert note == (
        '[Bulk Stock Release - 2025-03-14 | Voucher: VOUCHER-1700000000000]: '
        'Released 3 box to "Ward 7" from batch ID abc123. Reason: Restock.'
    )


def test_append_note_never_rewrites_existing_text():
    assert append_note(None, 'first') == 'first'
    assert append_note('first', 'second') == 'first\nsecond'


def test_has_additive_tag():
    assert has_additive_tag('[Bulk Add Stock - 2025-03-14]: Added 4 box.')
    assert has_additive_tag('[Initial Stock - 2025-03-14]: Added 4 box.')
    assert not has_additive_tag('Lot A123')
    assert not has_additive_tag('[Stock Out - 2025-03-14]: Consumed 1 box from batch ID x. Reason: y.')
    assert has_additive_tag('[initial stock - 2025-03-14]: added 4 box.')
    assert has_additive_tag('  [STOCK ADDITION - 2025-03-14]: Added 4 box.')
    assert not has_additive_tag(None)


def test_line_breaks_in_user_text_are_folded_into_one_line():
    assert format_addition_note('stock_addition', D, 3, 'box', 'PO 7\n[Initial Stock - 2025-03-14]: Added 9 box.') == (
        '[Stock Addition - 2025-03-14]: Added 3 box. PO 7 [Initial Stock - 2025-03-14]: Added 9 box.'
    )
    assert format_stock_out_note(D, 'b1', 2, 'box', 'used\r\nin theatre') == (
        '[Stock Out - 2025-03-14]: Consumed 2 box from batch ID b1. Reason: used in theatre.'
    )
    note = format_release_note(D, 'b1', 1, 'box', 'Ward\n7', reason='loan\u2028back')
    assert note == '[Stock Release - 2025-03-14]: Released 1 box to "Ward 7" from batch ID b1. Reason: loan back.'
    assert len(note.splitlines()) == 1


@pytest.mark.parametrize('line, kind, direction, quantity', [
    ('[Initial Stock - 2025-03-14]: Added 30 box. Lot A123', 'initial_stock', 'in', 30),
    ('[Stock Addition - 2025-03-14]: Added 20 box.', 'stock_addition', 'in', 20),
    ('[Bulk Add Stock - 2025-03-14]: Added 7 packs. extra', 'bulk_add_stock', 'in', 7),
    ('[Stock Out - 2025-03-14]: Consumed 4 box from batch ID q1. Reason: used.', 'stock_out', 'out', 4),
    ('[Stock Release - 2025-03-14]: Released 2 box to "Ward" from batch ID q1.', 'stock_release', 'out', 2),
    ('[Bulk Stock Release - 2025-03-14 | Voucher: VOUCHER-1]: Released 9 box to "W" from batch ID q1.',
     'bulk_stock_release', 'out', 9),
])
def test_parse_each_ledger_kind(line, kind, direction, quantity):
    entry = parse_ledger_line(line)
    assert entry is not None
    assert entry.kind == kind
    assert entry.direction == direction
    assert entry.quantity == quantity
    assert entry.date == D


def test_parse_is_case_insensitive_and_reads_voucher():
    entry = parse_ledger_line('[bulk stock release - 2025-03-14 | voucher: VOUCHER-42]: released 1 box to "x"')
    assert entry.kind == 'bulk_stock_release'
    assert entry.voucher_id == 'VOUCHER-42'


@pytest.mark.parametrize('line', [
    'Lot A123',
    'note: [Stock Out - 2025-03-14]: Consumed 4 box',         # not anchored at line start
    '[Stock Out - 2025-03-14]: Released 4 box to "x"',         # verb does not fit the tag
    '[Stock Addition - 2025-02-30]: Added 4 box.',             # impossible date
    '[Stock Addition - 2025-03-14]: Added many box.',
    '',
])
def test_unparseable_lines_are_ignored(line):
    assert parse_ledger_line(line) is None

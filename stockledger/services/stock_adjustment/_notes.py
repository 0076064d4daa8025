"""
Ledger note protocol.

Batch notes are append-only and newline-delimited. Machine-written lines
follow the tag grammar from the operation registry so movement analysis can
read them back with parse_ledger_line; human text sits alongside them.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterator, Optional

from ...utils.timezone_utils import ISO_DATE_FORMAT, TimezoneUtils
from ._operation_registry import (
    ADDITIVE_TAG_PREFIXES,
    LINE_PATTERNS,
    get_direction,
    get_tag,
    is_additive_operation,
)

_ADDITIVE_TAG_PATTERN = re.compile(
    r'^\s*(?:' + '|'.join(re.escape(prefix) for prefix in ADDITIVE_TAG_PREFIXES) + r')\b',
    re.IGNORECASE,
)


def single_line(value) -> str:
    """Fold any line break into a space so user text stays inside its tagged line."""
    return ' '.join(str(value or '').splitlines()).strip()


def _stamp(change_type: str, on_date: date, voucher_id: Optional[str] = None) -> str:
    date_text = TimezoneUtils.format_date(on_date)
    if voucher_id:
        return f"[{get_tag(change_type)} - {date_text} | Voucher: {single_line(voucher_id)}]"
    return f"[{get_tag(change_type)} - {date_text}]"


def format_addition_note(change_type: str, on_date: date, quantity: int, unit: str, text: Optional[str] = None) -> str:
    """[<Tag> - D]: Added Q U. <text>, trimmed."""
    if not is_additive_operation(change_type):
        raise ValueError(f"{change_type} is not an additive operation")
    line = f"{_stamp(change_type, on_date)}: Added {quantity} {single_line(unit)}. {single_line(text)}"
    return line.strip()


def format_stock_out_note(on_date: date, batch_id: str, quantity: int, unit: str, reason: str) -> str:
    return (
        f"{_stamp('stock_out', on_date)}: Consumed {quantity} {single_line(unit)} "
        f"from batch ID {batch_id}. Reason: {single_line(reason)}."
    )


def format_release_note(
    on_date: date,
    batch_id: str,
    quantity: int,
    unit: str,
    released_to: str,
    reason: Optional[str] = None,
    voucher_id: Optional[str] = None,
) -> str:
    change_type = 'bulk_stock_release' if voucher_id else 'stock_release'
    note = (
        f"{_stamp(change_type, on_date, voucher_id)}: Released {quantity} {single_line(unit)} "
        f"to \"{single_line(released_to)}\" from batch ID {batch_id}."
    )
    reason = single_line(reason)
    if reason:
        note += f" Reason: {reason}."
    return note


def append_note(existing: Optional[str], line: str) -> str:
    """Append one line to a notes field without rewriting what is there."""
    if not existing:
        return line
    return f"{existing}\n{line}"


def has_additive_tag(notes: Optional[str]) -> bool:
    """True when the notes already open with an additive ledger tag, in any case."""
    return bool(notes) and _ADDITIVE_TAG_PATTERN.match(notes) is not None


# ---------------------------------------------------------------------------
# Reading tagged lines back
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LedgerEntry:
    kind: str
    direction: str
    date: date
    quantity: int
    voucher_id: Optional[str] = None


def parse_ledger_line(line: Optional[str]) -> Optional[LedgerEntry]:
    """
    Match one notes line against the ledger grammar.

    Returns None for free text, for lines whose verb does not fit their tag
    and for lines carrying an impossible calendar date.
    """
    if not line:
        return None
    for change_type, pattern in LINE_PATTERNS.items():
        match = pattern.match(line)
        if not match:
            continue
        try:
            entry_date = datetime.strptime(match.group('date'), ISO_DATE_FORMAT).date()
        except ValueError:
            return None
        voucher = match.groupdict().get('voucher')
        return LedgerEntry(
            kind=change_type,
            direction=get_direction(change_type),
            date=entry_date,
            quantity=int(match.group('quantity')),
            voucher_id=voucher.strip() if voucher else None,
        )
    return None


def iter_ledger_entries(notes: Optional[str]) -> Iterator[LedgerEntry]:
    for line in (notes or '').splitlines():
        entry = parse_ledger_line(line)
        if entry is not None:
            yield entry

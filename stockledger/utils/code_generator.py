from __future__ import annotations

import secrets
import string

from .timezone_utils import TimezoneUtils

__all__ = ["generate_short_id", "generate_voucher_id"]

_ALPHABET = string.ascii_lowercase + string.digits


def generate_short_id(length: int = 9) -> str:
    """
    Generate a short lowercase base36 identifier for items and batches.

    Batch ids only need to be unique within their owning item.
    """
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def generate_voucher_id() -> str:
    """
    Voucher reference shared by every ledger line of one bulk release.

    Format: VOUCHER-{epoch milliseconds}
    """
    millis = int(TimezoneUtils.utc_now().timestamp() * 1000)
    return f"VOUCHER-{millis}"

"""Decimal helpers for monetary amounts."""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

CENTS = Decimal("0.01")


def to_money(value: Decimal | float | int | str | None) -> Decimal:
    """Round to two places, half away from zero."""

    return Decimal(str(value or 0)).quantize(CENTS, rounding=ROUND_HALF_UP)

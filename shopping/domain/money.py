# shopping/domain/money.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    #zawsze przez str, nigdy float -> Decimal bezposrednio
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def line_subtotal(quantity: int, unit_price) -> Decimal:
    return to_money(to_money(unit_price) * quantity)


def money_sum(amounts: Iterable[Decimal]) -> Decimal:
    return to_money(sum(amounts, Decimal("0.00")))


def format_money(value) -> str:
    return f"{to_money(value):.2f}"

from decimal import Decimal

from shopping.domain.money import format_money, line_subtotal, money_sum, to_money


def test_to_money_never_goes_through_binary_float():
    assert to_money(0.1) + to_money(0.2) == Decimal("0.30")
    assert to_money("2.675") == Decimal("2.68")


def test_line_subtotal_and_sum():
    subtotals = [line_subtotal(2, "9.99"), line_subtotal(1, Decimal("15"))]

    assert subtotals == [Decimal("19.98"), Decimal("15.00")]
    assert money_sum(subtotals) == Decimal("34.98")
    assert money_sum([]) == Decimal("0.00")


def test_format_money_has_two_places():
    assert format_money(Decimal("15")) == "15.00"
    assert format_money(Decimal("34.975")) == "34.98"

"""Tests for line and aggregate pricing."""

from decimal import Decimal

import pytest

from pricing import aggregate_total, line_total, prices_for_negotiated_total
from quote_errors import InvalidDimension
from quote_models import LineItem


def test_area_priced_item(cortina):
    """R$ 100/m2 x 2.0 x 1.5 x 1 = 300."""
    item = LineItem(id="a", product=cortina, width=2.0, height=1.5, quantity=1)
    assert line_total(item) == Decimal("300")


def test_area_priced_item_multiplies_quantity(cortina):
    item = LineItem(id="a", product=cortina, width=2, height=1, quantity=2)
    assert line_total(item) == Decimal("400")


def test_unit_priced_item_ignores_dimensions(suporte):
    item = LineItem(id="b", product=suporte.model_copy(update={"unit_price": Decimal("50")}),
                    width=7, height=9, quantity=3)
    assert line_total(item) == Decimal("150")


def test_quantity_defaults_to_one(suporte):
    assert line_total(LineItem(id="b", product=suporte)) == Decimal("20")


def test_item_without_product_is_zero():
    assert line_total(LineItem(id="x", width=3, height=2)) == 0


@pytest.mark.parametrize("field", ["width", "height", "quantity"])
def test_negative_dimension_is_rejected(cortina, field):
    item = LineItem(id="n", product=cortina, width=1, height=1, quantity=1).with_changes(**{field: -1})
    with pytest.raises(InvalidDimension) as exc:
        line_total(item)
    assert exc.value.item_id == "n"


def test_aggregate_total_is_order_independent(toldo, suporte):
    items = [
        LineItem(id="i1", product=toldo, width=2, height=1),
        LineItem(id="i2", product=suporte, quantity=1, parent_item_id="i1"),
    ]
    assert aggregate_total(items) == Decimal("180")
    assert aggregate_total(reversed(items)) == Decimal("180")


def test_aggregate_total_counts_each_item_once(suporte):
    item = LineItem(id="dup", product=suporte, quantity=2)
    assert aggregate_total([item, item]) == Decimal("40")


def test_aggregate_total_of_nothing():
    assert aggregate_total([]) == 0


def test_negotiated_total_scales_prices(toldo, suporte):
    items = [
        LineItem(id="i1", product=toldo, width=2, height=1),
        LineItem(id="i2", product=suporte),
    ]
    prices = prices_for_negotiated_total(items, Decimal("90"))
    assert prices == {"i1": Decimal("80"), "i2": Decimal("10")}


def test_negotiated_total_unchanged_when_equal_or_zero(suporte):
    items = [LineItem(id="i2", product=suporte)]
    assert prices_for_negotiated_total(items, Decimal("20")) == {"i2": Decimal("20")}
    empty = [LineItem(id="e")]
    assert prices_for_negotiated_total(empty, Decimal("500")) == {"e": Decimal("0")}


def test_negative_width_rejected_even_for_unit_priced(suporte):
    """A negative measurement is a typing error whatever the pricing unit."""
    with pytest.raises(InvalidDimension):
        line_total(LineItem(id="u", product=suporte, width=-2, height=1))

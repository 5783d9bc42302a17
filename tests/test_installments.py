"""Tests for the installment suggestion rule and schedule generation."""

from datetime import date
from decimal import Decimal

import pytest

from installments import build_schedule, schedule_total, suggest


def test_suggest_respects_minimum_installment():
    count, value = suggest(Decimal("1000"), Decimal("300"), 10)
    assert count == 3
    assert value == pytest.approx(Decimal("333.33"), abs=Decimal("0.01"))


def test_suggest_below_minimum_is_single_payment():
    assert suggest(150, 300, 10) == (1, Decimal("150"))


def test_suggest_zero_total_is_defined():
    assert suggest(0, 300, 10) == (1, Decimal("0"))


def test_suggest_negative_total_is_single_payment():
    assert suggest(Decimal("-10")) == (1, Decimal("-10"))


def test_suggest_is_capped_at_max_installments():
    count, value = suggest(Decimal("9000"), 300, 10)
    assert count == 10
    assert value == Decimal("900")


def test_suggest_uses_configured_defaults():
    assert suggest(Decimal("600")).count == 2


def test_schedule_without_down_payment():
    parcelas = build_schedule(Decimal("1000"), 3, start=date(2025, 1, 31))
    assert [p.number for p in parcelas] == [1, 2, 3]
    assert [p.value for p in parcelas] == [Decimal("333.33"), Decimal("333.33"), Decimal("333.34")]
    assert [p.due_date for p in parcelas] == [date(2025, 1, 31), date(2025, 2, 28), date(2025, 3, 31)]
    assert schedule_total(parcelas) == Decimal("1000.00")


def test_schedule_with_down_payment():
    parcelas = build_schedule(Decimal("1000"), 3, down_payment=Decimal("400"),
                              start=date(2025, 6, 10), payment_method="Cartão")
    assert [(p.number, p.value) for p in parcelas] == [
        (1, Decimal("400")),
        (2, Decimal("300.00")),
        (3, Decimal("300.00")),
    ]
    assert parcelas[0].due_date == date(2025, 6, 10)
    assert parcelas[1].due_date == date(2025, 7, 10)
    assert all(p.payment_method == "Cartão" and p.status == "PENDING" for p in parcelas)


def test_down_payment_larger_than_total():
    parcelas = build_schedule(Decimal("100"), 2, down_payment=Decimal("150"), start=date(2025, 1, 1))
    assert [p.value for p in parcelas] == [Decimal("150"), Decimal("0.00")]


def test_schedule_total_after_manual_edit():
    parcelas = build_schedule(Decimal("900"), 3, start=date(2025, 1, 1))
    parcelas[0] = parcelas[0].model_copy(update={"value": Decimal("500")})
    assert schedule_total(parcelas) == Decimal("1100.00")

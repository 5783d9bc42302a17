# -*- coding: utf-8 -*-
"""Cálculo de valores por item e do total do orçamento."""
import logging
from decimal import Decimal
from typing import Iterable

from quote_errors import InvalidDimension
from quote_models import LineItem, PricingUnit

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def _check_dimensions(item: LineItem) -> None:
    """Medida negativa é erro de digitação mesmo em produto por unidade, onde largura e altura não entram no valor."""
    for field, label in (("width", "Largura"), ("height", "Altura"), ("quantity", "Quantidade")):
        value = getattr(item, field)
        if value is not None and value < 0:
            raise InvalidDimension(f"{label} não pode ser negativa (item {item.id})", item_id=item.id)


def line_total(item: LineItem) -> Decimal:
    """Valor do item: preço × largura × altura × qtd (M2) ou preço × qtd (unidade).

    Item ainda sem produto vale zero enquanto o formulário é preenchido.
    """
    _check_dimensions(item)
    product = item.product
    if product is None:
        return ZERO
    qty = item.quantity if item.quantity is not None else Decimal("1")
    if product.pricing_unit == PricingUnit.PER_AREA:
        return product.unit_price * item.width * item.height * qty
    return product.unit_price * qty


def aggregate_total(items: Iterable[LineItem]) -> Decimal:
    seen: set[str] = set()
    total = ZERO
    for item in items:
        if item.id in seen:
            logger.warning("Item %s repetido no total; contado uma vez", item.id)
            continue
        seen.add(item.id)
        total += line_total(item)
    return total


def prices_for_negotiated_total(items: list[LineItem], negotiated_total: Decimal) -> dict[str, Decimal]:
    """Distribui um total negociado proporcionalmente entre os itens.

    Se o total calculado for zero ou igual ao negociado, mantém os valores originais.
    """
    base = {item.id: line_total(item) for item in items}
    computed = sum(base.values(), ZERO)
    negotiated_total = Decimal(str(negotiated_total))
    if computed <= 0 or computed == negotiated_total:
        return base
    ratio = negotiated_total / computed
    logger.debug("Rateio do total negociado: %s / %s", negotiated_total, computed)
    return {item_id: value * ratio for item_id, value in base.items()}

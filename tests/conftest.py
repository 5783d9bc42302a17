"""Shared fixtures for the quoting core tests."""

from decimal import Decimal

import pytest

from ids import sequential_allocator
from quote_models import PricingUnit, Product


@pytest.fixture
def toldo():
    """Area-priced product (R$ 80,00/m2)."""
    return Product(
        id="P1",
        name="Toldo Retrátil",
        category="Toldo",
        unit_price=Decimal("80"),
        pricing_unit=PricingUnit.PER_AREA,
    )


@pytest.fixture
def suporte():
    """Accessory priced per unit."""
    return Product(
        id="P2",
        name="Suporte Reforçado",
        category="Acessório",
        unit_price=Decimal("20"),
        pricing_unit=PricingUnit.PER_UNIT,
        accessory=True,
        unit_label="UN",
    )


@pytest.fixture
def cortina():
    return Product(
        id="P3",
        name="Cortina Blackout",
        category="Cortina",
        unit_price=Decimal("100"),
        pricing_unit=PricingUnit.PER_AREA,
    )


@pytest.fixture
def catalog(toldo, suporte, cortina):
    return [toldo, suporte, cortina]


@pytest.fixture
def allocate_id():
    return sequential_allocator("novo")


@pytest.fixture
def catalog_records():
    """Raw product rows as they come from the product registry."""
    return [
        {"id": "P1", "nome": "Toldo Retrátil", "tipo": "Toldo", "valor": 80, "unidade": "M2", "acessorio": False},
        {"id": "P2", "nome": "Suporte Reforçado", "tipo": "Acessório", "valor": 20, "unidade": "UN", "acessorio": True},
        {"id": "P3", "nome": "Cortina Blackout", "tipo": "Cortina", "valor": 100, "unidade": "M2", "acessorio": False},
    ]


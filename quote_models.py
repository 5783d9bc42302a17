# -*- coding: utf-8 -*-
"""Modelos do orçamento: produtos do catálogo, itens de medição e parcelas."""
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Literal, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field

from quote_errors import InvalidPrice


def _plain_number(txt: str) -> str:
    return txt.replace(".", "").replace(",", ".") if "," in txt else txt


def parse_ptbr_decimal(txt) -> Decimal:
    """'1.234,5' -> Decimal('1234.5'); vazio ou inválido vira zero (campo ainda em digitação)."""
    if isinstance(txt, (int, float, Decimal)):
        return Decimal(str(txt))
    try:
        return Decimal(_plain_number((txt or "").strip()))
    except InvalidOperation:
        return Decimal("0")


def _parse_price(value, product_id: str) -> Decimal:
    if value is None or (isinstance(value, str) and not value.strip()):
        return Decimal("0")
    try:
        price = Decimal(_plain_number(str(value).strip()))
    except InvalidOperation:
        raise InvalidPrice(f"Valor inválido para o produto {product_id}: {value!r}")
    if not price.is_finite() or price < 0:
        raise InvalidPrice(f"Valor inválido para o produto {product_id}: {value!r}")
    return price


class PricingUnit(str, Enum):
    PER_UNIT = "PER_UNIT"
    PER_AREA = "PER_AREA"

    @classmethod
    def from_unidade(cls, unidade: str | None) -> "PricingUnit":
        # No cadastro de produtos só "M2" é cobrado por área
        return cls.PER_AREA if (unidade or "").strip().upper() == "M2" else cls.PER_UNIT


class Product(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    category: str = ""
    unit_price: Decimal = Decimal("0")
    pricing_unit: PricingUnit = PricingUnit.PER_UNIT
    accessory: bool = False
    unit_label: Optional[str] = None

    @classmethod
    def from_record(cls, d: dict[str, Any]) -> "Product":
        """Converte o registro bruto do cadastro (id, nome, tipo, valor, unidade, acessorio)."""
        unidade = str(d.get("unidade") or "").strip()
        return cls(
            id=str(d.get("id") or "").strip(),
            name=str(d.get("nome") or d.get("name") or "").strip(),
            category=str(d.get("tipo") or d.get("category") or "").strip(),
            unit_price=_parse_price(d.get("valor", d.get("unit_price")), str(d.get("id") or "")),
            pricing_unit=PricingUnit.from_unidade(unidade),
            accessory=bool(d.get("acessorio") or d.get("accessory") or False),
            unit_label=unidade or None,
        )


class LineItem(BaseModel):
    """Item de medição / linha de orçamento.

    `parent_item_id` é só uma chave de consulta para outro item da mesma
    coleção; o pai pode ter sido removido, e nesse caso o item conta como
    não agrupado.
    """

    id: str
    environment: str = ""
    product: Optional[Product] = None
    color: Optional[str] = None
    width: Decimal = Decimal("0")
    height: Decimal = Decimal("0")
    quantity: Decimal = Decimal("1")
    parent_item_id: Optional[str] = None
    notes: Optional[str] = None

    def with_changes(self, **fields: Any) -> "LineItem":
        data = self.model_dump()
        data.update(fields)
        return LineItem.model_validate(data)


class MeasurementSheet(BaseModel):
    id: str
    customer_id: str
    seller_id: Optional[str] = None
    items: list[LineItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)


class Installment(BaseModel):
    number: int
    value: Decimal
    due_date: date
    status: Literal["PENDING", "PAID"] = "PENDING"
    payment_method: Optional[str] = None


class InstallmentSuggestion(NamedTuple):
    count: int
    value: Decimal

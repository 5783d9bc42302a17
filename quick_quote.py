# -*- coding: utf-8 -*-
"""Orçamento rápido: carrinho de produtos com total, parcelamento e texto para WhatsApp."""
import logging
from decimal import Decimal
from typing import Iterable

from app_config import MAX_PARCELAS, NOME_EMPRESA, PARCELA_MINIMA
from ids import IdAllocator, uuid_allocator
from installments import suggest
from pricing import aggregate_total, line_total
from quote_errors import UnknownItem, UnknownProduct
from quote_models import InstallmentSuggestion, LineItem, PricingUnit, Product, parse_ptbr_decimal
from search_utils import filter_products

logger = logging.getLogger(__name__)

LINHA = "-" * 34


def pt(n) -> str:
    return f"{n:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")


class QuickQuote:
    _NUMERIC = ("width", "height", "quantity")

    def __init__(self, products: Iterable[Product], allocate_id: IdAllocator = uuid_allocator):
        self.products = list(products)
        self._by_id = {p.id: p for p in self.products}
        self._allocate_id = allocate_id
        self.items: list[LineItem] = []

    def search(self, term: str) -> list[Product]:
        return filter_products(self.products, term)

    def add_product(self, product_id: str) -> LineItem:
        product = self._by_id.get(product_id)
        if product is None:
            raise UnknownProduct(f"Produto {product_id} não encontrado")
        item = LineItem(
            id=self._allocate_id(),
            product=product,
            quantity=Decimal("1"),
            width=Decimal("1"),
            height=Decimal("1"),
        )
        self.items = [*self.items, item]
        return item

    def remove_item(self, item_id: str) -> None:
        self.items = [i for i in self.items if i.id != item_id]

    def update_item(self, item_id: str, **fields) -> LineItem:
        for k in self._NUMERIC:
            if k in fields and isinstance(fields[k], str):
                fields[k] = parse_ptbr_decimal(fields[k])
        updated = None
        new_items = []
        for i in self.items:
            if i.id == item_id:
                updated = i.with_changes(**fields)
                new_items.append(updated)
            else:
                new_items.append(i)
        if updated is None:
            raise UnknownItem(f"Item {item_id} não encontrado", item_id=item_id)
        self.items = new_items
        return updated

    def total(self) -> Decimal:
        return aggregate_total(self.items)

    def suggestion(self, min_installment=PARCELA_MINIMA, max_installments: int = MAX_PARCELAS) -> InstallmentSuggestion:
        return suggest(self.total(), min_installment, max_installments)

    def whatsapp_text(self, min_installment=PARCELA_MINIMA, max_installments: int = MAX_PARCELAS) -> str:
        total = self.total()
        count, value = self.suggestion(min_installment, max_installments)

        text = f"*ORÇAMENTO RÁPIDO - {NOME_EMPRESA}*\n{LINHA}\n"
        for idx, item in enumerate(self.items, start=1):
            product = item.product
            text += f"*{idx}. {product.name if product else 'Item sem produto'}*\n"
            if item.environment:
                text += f"📍 Ambiente: {item.environment}\n"
            if product and product.pricing_unit == PricingUnit.PER_AREA:
                text += f"📏 Medidas: {item.width:.2f}m x {item.height:.2f}m\n"
            else:
                unidade = (product.unit_label if product else None) or "UN"
                text += f"📦 Qtd: {item.quantity.normalize():f} {unidade}\n"
            text += f"💰 Subtotal: R$ {pt(line_total(item))}\n\n"
        text += f"{LINHA}\n*TOTAL ESTIMADO: R$ {pt(total)}*\n\n"

        text += "*FORMAS DE PAGAMENTO:*\n"
        text += f"💳 Cartão de Crédito: Parcelamos em até {max_installments}x sem juros.\n"
        text += f"📉 Parcela Mínima: R$ {pt(Decimal(str(min_installment)))}.\n\n"
        if count > 1:
            text += (
                f"Como o valor total é de R$ {pt(total)}, o parcelamento máximo permitido pela regra "
                f"da parcela mínima seria de *{count}x de R$ {pt(value)}*.\n\n"
            )
        else:
            text += "Para este valor, o pagamento é à vista ou em 1x no cartão.\n\n"
        text += "_Valores sujeitos a confirmação técnica._"
        return text

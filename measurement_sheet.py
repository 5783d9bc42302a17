# -*- coding: utf-8 -*-
"""Sessão de uma ficha de medição aberta.

A sessão é dona da coleção de itens e dos conjuntos de seleção. Itens novos
entram selecionados; salvar a ficha limpa tudo, "salvar e orçar" mantém a
seleção.
"""
import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

import grouping
from ids import IdAllocator, uuid_allocator
from quote_errors import (
    EmptySelection,
    IncompleteItem,
    InvalidDimension,
    InvalidGrouping,
    QuoteError,
    UnknownItem,
    UnknownProduct,
)
from quote_models import LineItem, MeasurementSheet, Product
from selection import CURRENT, SelectionEngine

logger = logging.getLogger(__name__)


class SheetSession:
    def __init__(
        self,
        customer_id: str,
        products: Iterable[Product],
        allocate_id: IdAllocator = uuid_allocator,
        seller_id: Optional[str] = None,
        editing: Optional[MeasurementSheet] = None,
    ):
        self.customer_id = customer_id
        self.seller_id = seller_id
        self._products = {p.id: p for p in products}
        self._allocate_id = allocate_id
        self.selection = SelectionEngine(allocate_id)
        self.items: list[LineItem] = []
        self.sheet_id: Optional[str] = None
        self._created_at: Optional[datetime] = None
        self._editing_id: Optional[str] = None
        if editing is not None:
            self.customer_id = editing.customer_id
            self.seller_id = editing.seller_id or seller_id
            self.items = [i.model_copy(deep=True) for i in editing.items]
            for i in self.items:
                self.selection.select(CURRENT, i.id)
            self.sheet_id = editing.id
            self._editing_id = editing.id
            self._created_at = editing.created_at

    # ---------- itens ----------
    def _get(self, item_id: str) -> LineItem:
        for i in self.items:
            if i.id == item_id:
                return i
        raise UnknownItem(f"Item {item_id} não encontrado", item_id=item_id)

    def _put(self, updated: LineItem) -> LineItem:
        self.items = [updated if i.id == updated.id else i for i in self.items]
        return updated

    def add_item(self, parent_item_id: Optional[str] = None, **fields) -> LineItem:
        item = LineItem(id=self._allocate_id(), **fields)
        items = [*self.items, item]
        if parent_item_id:
            items = grouping.attach(items, item.id, parent_item_id)
        self.items = items
        self.selection.select(CURRENT, item.id)
        return items[-1]

    def remove_item(self, item_id: str) -> None:
        self.items = grouping.remove_item(self.items, item_id)
        self.selection.deselect(CURRENT, item_id)

    def update_item(self, item_id: str, **fields) -> LineItem:
        if "product" in fields or "parent_item_id" in fields:
            raise ValueError("Use set_product/attach/detach para produto e vínculo")
        return self._put(self._get(item_id).with_changes(**fields))

    def set_product(self, item_id: str, product_id: Optional[str]) -> LineItem:
        product = None
        if product_id:
            product = self._products.get(product_id)
            if product is None:
                raise UnknownProduct(f"Produto {product_id} não encontrado", item_id=item_id)
        return self._put(grouping.on_product_change(self._get(item_id), product))

    def attach(self, child_id: str, parent_id: str) -> None:
        self.items = grouping.attach(self.items, child_id, parent_id)

    def detach(self, child_id: str) -> None:
        self.items = grouping.detach(self.items, child_id)

    def grouped(self):
        return grouping.group_for_display(self.items)

    # ---------- seleção ----------
    def toggle(self, item_id: str) -> bool:
        return self.selection.toggle(CURRENT, item_id)

    def toggle_historical(self, sheet_id: str, item_id: str) -> bool:
        return self.selection.toggle(sheet_id, item_id)

    def total_selected_count(self) -> int:
        return self.selection.total_selected_count()

    def historical_sheets(self, all_sheets: Iterable[MeasurementSheet]) -> list[MeasurementSheet]:
        """Fichas anteriores do mesmo cliente, mais recentes primeiro."""
        sheets = [s for s in all_sheets if s.customer_id == self.customer_id and s.id != self._editing_id]
        return sorted(sheets, key=lambda s: s.created_at, reverse=True)

    # ---------- validação / gravação ----------
    def validate(self, check_items: bool = True) -> None:
        if not self.customer_id:
            raise QuoteError("Por favor, selecione um cliente.")
        if check_items and not self.items and self.total_selected_count() == 0:
            raise EmptySelection("Adicione ao menos um item de medição ou selecione itens do histórico.")
        for i in self.items:
            if i.product is None or not i.environment.strip():
                raise IncompleteItem(
                    "Por favor, preencha o Ambiente e selecione o Produto para todos os itens novos.",
                    item_id=i.id,
                )
            if min(i.width, i.height, i.quantity) < 0:
                raise InvalidDimension(f"Medidas negativas no item {i.id}", item_id=i.id)
            if i.parent_item_id:
                self._check_grouping(i)

    def _check_grouping(self, item: LineItem) -> None:
        if item.parent_item_id == item.id:
            raise InvalidGrouping("Um item não pode ser vinculado a ele mesmo", item_id=item.id)
        if not item.product.accessory:
            raise InvalidGrouping("Somente acessórios podem ser vinculados a um item", item_id=item.id)
        by_id = {i.id: i for i in self.items}
        seen = {item.id}
        current = item.parent_item_id
        # pai inexistente é aceito (item fica sem grupo)
        while current in by_id:
            if current in seen:
                raise InvalidGrouping("Vínculo de acessório forma um ciclo", item_id=item.id)
            seen.add(current)
            current = by_id[current].parent_item_id

    def _sheet(self, items: Sequence[LineItem]) -> MeasurementSheet:
        if self.sheet_id is None:
            self.sheet_id = self._allocate_id()
        return MeasurementSheet(
            id=self.sheet_id,
            customer_id=self.customer_id,
            seller_id=self.seller_id,
            items=list(items),
            created_at=self._created_at or datetime.now(),
        )

    def save(self) -> MeasurementSheet:
        self.validate(True)
        sheet = self._sheet([i.model_copy(deep=True) for i in self.items])
        logger.info("Ficha %s salva com %d itens", sheet.id, len(sheet.items))
        self.items = []
        self.selection.clear()
        return sheet

    def save_and_quote(self, historical_sheets: Iterable[MeasurementSheet] = ()) -> MeasurementSheet:
        """Ficha nova com os itens selecionados (atuais + importados) para o orçamento."""
        self.validate(True)
        items = self.selection.materialize(self.items, self.historical_sheets(historical_sheets))
        sheet = self._sheet(items)
        logger.info("Ficha %s enviada para orçamento com %d itens", sheet.id, len(items))
        return sheet

    def quote_from_history(self, sheet: MeasurementSheet) -> list[LineItem]:
        """Orçamento direto de uma ficha antiga: só os itens marcados dela, com os ids originais."""
        items = self.selection.items_for(sheet)
        logger.info("Orçamento a partir da ficha %s com %d itens", sheet.id, len(items))
        return items

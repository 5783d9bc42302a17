# -*- coding: utf-8 -*-
"""Seleção de itens (ficha atual + fichas antigas) para gerar o orçamento."""
import logging
from typing import Iterable, Optional, Sequence

from ids import IdAllocator, uuid_allocator
from quote_errors import EmptySelection
from quote_models import LineItem, MeasurementSheet

logger = logging.getLogger(__name__)

CURRENT = "__current__"

MSG_SEM_ITEM_HISTORICO = "Por favor, selecione pelo menos um item desta medição antiga para compor o orçamento."


class SelectionEngine:
    """Um conjunto de ids por coleção: CURRENT e um por ficha histórica.

    Não é thread-safe; cada ficha aberta tem a sua instância.
    """

    def __init__(self, allocate_id: IdAllocator = uuid_allocator):
        self._allocate_id = allocate_id
        self._sets: dict[str, set[str]] = {CURRENT: set()}

    def _set(self, key: str) -> set[str]:
        return self._sets.setdefault(key, set())

    def select(self, key: str, item_id: str) -> None:
        self._set(key).add(item_id)

    def deselect(self, key: str, item_id: str) -> None:
        self._set(key).discard(item_id)

    def toggle(self, key: str, item_id: str) -> bool:
        s = self._set(key)
        if item_id in s:
            s.discard(item_id)
            return False
        s.add(item_id)
        return True

    def is_selected(self, key: str, item_id: str) -> bool:
        return item_id in self._sets.get(key, ())

    def selected_ids(self, key: str) -> frozenset[str]:
        return frozenset(self._sets.get(key, ()))

    def total_selected_count(self) -> int:
        return sum(len(s) for s in self._sets.values())

    def clear(self) -> None:
        self._sets = {CURRENT: set()}

    def materialize(
        self,
        current_items: Sequence[LineItem],
        historical_sheets: Iterable[MeasurementSheet] = (),
    ) -> list[LineItem]:
        """Itens finais do orçamento: atuais primeiro, depois os importados do histórico.

        Itens atuais saem como cópia com o mesmo id. Itens históricos são
        clonados com id novo e sem vínculo de acessório, pois o pai pode não
        estar no mesmo lote.
        """
        if self.total_selected_count() == 0:
            raise EmptySelection()

        current_ids = self._sets.get(CURRENT, set())
        result = [i.model_copy(deep=True) for i in current_items if i.id in current_ids]
        found = {i.id for i in result}
        for missing in current_ids - found:
            logger.warning("Item selecionado %s não está mais na ficha", missing)

        for sheet in historical_sheets:
            ids = self._sets.get(sheet.id)
            if not ids:
                continue
            for item in sheet.items:
                if item.id in ids:
                    result.append(item.with_changes(id=self._allocate_id(), parent_item_id=None))

        if not result:
            # só ids que não existem mais nas coleções recebidas
            raise EmptySelection()
        logger.debug("Materializados %d itens (%d da ficha atual)", len(result), len(found))
        return result

    def items_for(self, sheet: MeasurementSheet) -> list[LineItem]:
        """Itens selecionados de uma única ficha antiga, com os ids originais.

        Usado para orçar direto a partir de uma medição do histórico.
        """
        items = order_items(sheet, self._sets.get(sheet.id, ()))
        if not items:
            raise EmptySelection(MSG_SEM_ITEM_HISTORICO)
        return items


def order_items(sheet: MeasurementSheet, item_ids: Optional[Iterable[str]] = None) -> list[LineItem]:
    """Itens da ficha que entram no pedido; sem lista de ids, entram todos."""
    if item_ids is None:
        return [i.model_copy(deep=True) for i in sheet.items]
    wanted = set(item_ids)
    return [i.model_copy(deep=True) for i in sheet.items if i.id in wanted]

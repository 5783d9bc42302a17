# -*- coding: utf-8 -*-
"""Agrupamento de acessórios sob um item pai.

As funções recebem a coleção e devolvem uma nova lista; nada é alterado no lugar.
A integridade é "fraca": remover o pai não remove os filhos, e uma referência
para um pai inexistente é tratada como item sem grupo.
"""
import logging
from typing import Iterable, Optional, Sequence

from quote_errors import InvalidGrouping
from quote_models import LineItem, Product

logger = logging.getLogger(__name__)


def _index(items: Sequence[LineItem]) -> dict[str, LineItem]:
    return {i.id: i for i in items}


def _replace(items: Sequence[LineItem], updated: LineItem) -> list[LineItem]:
    return [updated if i.id == updated.id else i for i in items]


def attach(items: Sequence[LineItem], child_id: str, parent_id: str) -> list[LineItem]:
    if child_id == parent_id:
        raise InvalidGrouping("Um item não pode ser vinculado a ele mesmo", item_id=child_id)
    by_id = _index(items)
    child = by_id.get(child_id)
    if child is None:
        raise InvalidGrouping(f"Item {child_id} não pertence a esta ficha", item_id=child_id)
    if parent_id not in by_id:
        raise InvalidGrouping(f"Item pai {parent_id} não pertence a esta ficha", item_id=child_id)
    if child.product is None or not child.product.accessory:
        raise InvalidGrouping("Somente acessórios podem ser vinculados a um item", item_id=child_id)

    # sobe a cadeia de pais a partir do novo pai; encontrar o filho fecharia um ciclo
    visited = set()
    current: Optional[str] = parent_id
    while current is not None and current in by_id and current not in visited:
        if current == child_id:
            raise InvalidGrouping("Vínculo criaria um ciclo entre itens", item_id=child_id)
        visited.add(current)
        current = by_id[current].parent_item_id

    logger.debug("Acessório %s vinculado a %s", child_id, parent_id)
    return _replace(items, child.with_changes(parent_item_id=parent_id))


def detach(items: Sequence[LineItem], child_id: str) -> list[LineItem]:
    return [i.with_changes(parent_item_id=None) if i.id == child_id else i for i in items]


def on_product_change(item: LineItem, new_product: Optional[Product]) -> LineItem:
    """Troca o produto do item; se deixar de ser acessório, desfaz o vínculo."""
    changes: dict = {"product": new_product}
    if new_product is None or not new_product.accessory:
        changes["parent_item_id"] = None
    return item.with_changes(**changes)


def children_of(items: Iterable[LineItem], parent_id: str) -> list[LineItem]:
    return [i for i in items if i.parent_item_id == parent_id]


def parent_of(items: Sequence[LineItem], item: LineItem) -> Optional[LineItem]:
    if not item.parent_item_id:
        return None
    parent = _index(items).get(item.parent_item_id)
    if parent is None:
        logger.warning("Item %s aponta para pai inexistente %s", item.id, item.parent_item_id)
    return parent


def remove_item(items: Sequence[LineItem], item_id: str) -> list[LineItem]:
    # não remove os acessórios; o parent_item_id deles fica pendente
    return [i for i in items if i.id != item_id]


def group_for_display(items: Sequence[LineItem]) -> list[tuple[LineItem, list[LineItem]]]:
    """Pares (item raiz, acessórios) na ordem da ficha.

    Acessório com pai inexistente, ou cujo pai também é acessório, aparece como raiz.
    """
    by_id = _index(items)
    ungrouped = {i.id for i in items if not i.parent_item_id or i.parent_item_id not in by_id}
    roots = [i for i in items if i.id in ungrouped or i.parent_item_id not in ungrouped]
    root_ids = {r.id for r in roots}
    return [(r, [c for c in children_of(items, r.id) if c.id not in root_ids]) for r in roots]

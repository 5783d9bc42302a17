# -*- coding: utf-8 -*-
"""Busca insensível a acentos usada nos filtros de produtos e clientes."""
import re
import unicodedata
from typing import Iterable

from quote_models import Product

_COMBINING = re.compile("[\u0300-\u036f]")


def normalize(text: str) -> str:
    """Minúsculas + remoção de acentos (NFD e descarte das marcas combinantes)."""
    return _COMBINING.sub("", unicodedata.normalize("NFD", (text or "").lower()))


def matches(haystack: str, needle: str) -> bool:
    if not needle:
        return True
    if not haystack:
        return False
    return normalize(needle) in normalize(haystack)


def filter_products(products: Iterable[Product], term: str) -> list[Product]:
    return [p for p in products if matches(p.name, term) or matches(p.category, term)]

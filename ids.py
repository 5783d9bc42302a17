# -*- coding: utf-8 -*-
import itertools
import uuid
from typing import Callable

IdAllocator = Callable[[], str]


def uuid_allocator() -> str:
    return str(uuid.uuid4())


def sequential_allocator(prefix: str = "item") -> IdAllocator:
    """Gera ids previsíveis (item-1, item-2, ...), útil em testes."""
    counter = itertools.count(1)

    def _next() -> str:
        return f"{prefix}-{next(counter)}"

    return _next

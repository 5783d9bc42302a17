# -*- coding: utf-8 -*-
"""Erros tipados do núcleo de orçamento.

Todos são recuperáveis: a camada que chama (UI ou API) mostra a mensagem
ao usuário e deixa corrigir o dado.
"""


class QuoteError(Exception):
    """Base para falhas de validação do orçamento."""

    def __init__(self, message: str, item_id: str | None = None):
        super().__init__(message)
        self.message = message
        self.item_id = item_id


class InvalidDimension(QuoteError):
    """Largura, altura ou quantidade negativa."""


class InvalidGrouping(QuoteError):
    """Vínculo de acessório inválido (auto-referência, item inexistente ou ciclo)."""


class EmptySelection(QuoteError):
    def __init__(self, message: str = "Por favor, selecione pelo menos um item para compor o orçamento."):
        super().__init__(message)


class IncompleteItem(QuoteError):
    """Item sem ambiente ou sem produto na hora de salvar a ficha."""


class UnknownProduct(QuoteError):
    pass


class UnknownItem(QuoteError):
    pass


class InvalidPrice(QuoteError):
    """Valor do produto no cadastro não é um número válido."""

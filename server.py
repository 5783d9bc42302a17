# -*- coding: utf-8 -*-
"""API (FastAPI) que expõe o núcleo de orçamento para a aplicação web."""
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from app_config import ALLOWED_ORIGINS, MAX_PARCELAS, PARCELA_MINIMA, configure_logging
from installments import build_schedule, suggest
from pricing import aggregate_total, line_total
from quick_quote import QuickQuote, pt
from quote_errors import EmptySelection, QuoteError
from quote_models import LineItem, MeasurementSheet, Product
from search_utils import filter_products
from selection import CURRENT, SelectionEngine

configure_logging()
logger = logging.getLogger(__name__)


class ItemIn(BaseModel):
    id: str
    product_id: Optional[str] = None
    environment: str = ""
    color: Optional[str] = None
    width: Decimal = Decimal("0")
    height: Decimal = Decimal("0")
    quantity: Decimal = Decimal("1")
    parent_item_id: Optional[str] = None
    notes: Optional[str] = None


class FichaIn(BaseModel):
    id: str
    customer_id: str
    created_at: Optional[datetime] = None
    itens: List[ItemIn] = Field(default_factory=list)


class BuscaIn(BaseModel):
    produtos: List[Dict[str, Any]]
    termo: str = ""


class ItemRapidoIn(BaseModel):
    product_id: str
    quantidade: Decimal = Decimal("1")
    largura: Decimal = Decimal("1")
    altura: Decimal = Decimal("1")
    ambiente: str = ""


class OrcamentoRapidoIn(BaseModel):
    produtos: List[Dict[str, Any]]
    itens: List[ItemRapidoIn]
    parcela_minima: Decimal = PARCELA_MINIMA
    max_parcelas: int = MAX_PARCELAS


class MaterializarIn(BaseModel):
    produtos: List[Dict[str, Any]]
    itens_atuais: List[ItemIn] = Field(default_factory=list)
    selecionados: List[str] = Field(default_factory=list)
    historico: List[FichaIn] = Field(default_factory=list)
    historico_selecionados: Dict[str, List[str]] = Field(default_factory=dict)
    parcela_minima: Decimal = PARCELA_MINIMA
    max_parcelas: int = MAX_PARCELAS


class ParcelasIn(BaseModel):
    total: Decimal
    parcelas: int = Field(1, ge=1)
    entrada: Decimal = Decimal("0")
    inicio: Optional[date] = None
    forma_pagamento: Optional[str] = None


app = FastAPI(title="Orçamentos e Fichas de Medição API")

if ALLOWED_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _http_error(ex: QuoteError) -> HTTPException:
    status = 422 if isinstance(ex, EmptySelection) else 400
    logger.info("Requisição recusada (%s): %s", type(ex).__name__, ex.message)
    return HTTPException(status, ex.message)


def _catalogo(rows: List[Dict[str, Any]]) -> Dict[str, Product]:
    try:
        produtos = [Product.from_record(r) for r in rows]
    except QuoteError as ex:
        raise _http_error(ex)
    return {p.id: p for p in produtos}


def _to_item(body: ItemIn, catalogo: Dict[str, Product]) -> LineItem:
    data = body.model_dump(exclude={"product_id"})
    if body.product_id:
        product = catalogo.get(body.product_id)
        if product is None:
            raise HTTPException(400, f"Produto {body.product_id} não encontrado")
        data["product"] = product
    return LineItem.model_validate(data)


def _item_out(item: LineItem) -> Dict[str, Any]:
    subtotal = line_total(item)
    return {
        "id": item.id,
        "product_id": item.product.id if item.product else None,
        "environment": item.environment,
        "color": item.color,
        "width": float(item.width),
        "height": float(item.height),
        "quantity": float(item.quantity),
        "parent_item_id": item.parent_item_id,
        "subtotal": float(subtotal),
        "subtotal_fmt": pt(subtotal),
    }


def _totais(total: Decimal, parcela_minima: Decimal, max_parcelas: int) -> Dict[str, Any]:
    count, value = suggest(total, parcela_minima, max_parcelas)
    return {
        "total": float(total),
        "total_fmt": pt(total),
        "parcelas": count,
        "valor_parcela": float(round(value, 2)),
        "valor_parcela_fmt": pt(value),
    }


@app.get("/api/info")
async def api_info():
    return {
        "service": "orcamentos",
        "parcela_minima": float(PARCELA_MINIMA),
        "max_parcelas": MAX_PARCELAS,
    }


@app.post("/api/produtos/busca")
async def buscar_produtos(body: BuscaIn):
    produtos = list(_catalogo(body.produtos).values())
    rows = filter_products(produtos, body.termo)
    return {"count": len(rows), "rows": [p.model_dump(mode="json") for p in rows]}


@app.post("/api/orcamento-rapido")
async def orcamento_rapido(body: OrcamentoRapidoIn):
    quote = QuickQuote(_catalogo(body.produtos).values())
    try:
        for it in body.itens:
            item = quote.add_product(it.product_id)
            quote.update_item(
                item.id,
                quantity=it.quantidade,
                width=it.largura,
                height=it.altura,
                environment=it.ambiente,
            )
        out = {"itens": [_item_out(i) for i in quote.items]}
        out.update(_totais(quote.total(), body.parcela_minima, body.max_parcelas))
        out["texto"] = quote.whatsapp_text(body.parcela_minima, body.max_parcelas)
    except QuoteError as ex:
        raise _http_error(ex)
    return out


@app.post("/api/fichas/materializar")
async def materializar(body: MaterializarIn):
    catalogo = _catalogo(body.produtos)
    atuais = [_to_item(i, catalogo) for i in body.itens_atuais]
    historico = [
        MeasurementSheet(
            id=f.id,
            customer_id=f.customer_id,
            created_at=f.created_at or datetime.now(),
            items=[_to_item(i, catalogo) for i in f.itens],
        )
        for f in body.historico
    ]

    engine = SelectionEngine()
    for item_id in body.selecionados:
        engine.select(CURRENT, item_id)
    for sheet_id, ids in body.historico_selecionados.items():
        for item_id in ids:
            engine.select(sheet_id, item_id)

    try:
        itens = engine.materialize(atuais, historico)
        out = {"count": len(itens), "itens": [_item_out(i) for i in itens]}
        out.update(_totais(aggregate_total(itens), body.parcela_minima, body.max_parcelas))
    except QuoteError as ex:
        raise _http_error(ex)
    return out


@app.post("/api/parcelas")
async def gerar_parcelas(body: ParcelasIn):
    parcelas = build_schedule(body.total, body.parcelas, body.entrada, body.inicio, body.forma_pagamento)
    return {
        "count": len(parcelas),
        "rows": [p.model_dump(mode="json") for p in parcelas],
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server:app", host="0.0.0.0", port=8000)

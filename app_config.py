# -*- coding: utf-8 -*-
"""Configuração via variáveis de ambiente (.env) e setup de logging."""
import logging
import os
from decimal import Decimal

from dotenv import load_dotenv

load_dotenv()

# Debug opcional: defina ORC_DEBUG=1
ORC_DEBUG = os.environ.get("ORC_DEBUG", "0") == "1"
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if ORC_DEBUG else "INFO").upper()

# Regra de parcelamento: até MAX_PARCELAS sem juros, parcela mínima PARCELA_MINIMA
PARCELA_MINIMA = Decimal(os.getenv("PARCELA_MINIMA", "300"))
MAX_PARCELAS = int(os.getenv("MAX_PARCELAS", "10"))

ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "").split(",") if o.strip()]

NOME_EMPRESA = os.getenv("NOME_EMPRESA", "RTC DECOR")


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def get_config_summary() -> str:
    lines = [
        f"ORC_DEBUG: {ORC_DEBUG}",
        f"LOG_LEVEL: {LOG_LEVEL}",
        f"PARCELA_MINIMA: {PARCELA_MINIMA}",
        f"MAX_PARCELAS: {MAX_PARCELAS}",
        f"ALLOWED_ORIGINS: {', '.join(ALLOWED_ORIGINS) or '(nenhuma)'}",
    ]
    return "\n".join(lines)

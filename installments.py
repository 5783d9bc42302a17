# -*- coding: utf-8 -*-
"""Sugestão de parcelamento e geração das parcelas."""
import calendar
import logging
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from app_config import MAX_PARCELAS, PARCELA_MINIMA
from quote_models import Installment, InstallmentSuggestion

logger = logging.getLogger(__name__)

CENTAVOS = Decimal("0.01")


def _dec(v) -> Decimal:
    return v if isinstance(v, Decimal) else Decimal(str(v))


def _add_months(d: date, months: int) -> date:
    # dia 31 em mês curto cai no último dia do mês
    y, m = divmod(d.month - 1 + months, 12)
    year, month = d.year + y, m + 1
    return d.replace(year=year, month=month, day=min(d.day, calendar.monthrange(year, month)[1]))


def suggest(total, min_installment=PARCELA_MINIMA, max_installments: int = MAX_PARCELAS) -> InstallmentSuggestion:
    """Maior número de parcelas que respeita a parcela mínima, limitado a `max_installments`.

    >>> suggest(Decimal("1000")).count
    3
    """
    total = _dec(total)
    min_installment = _dec(min_installment)
    if total <= 0 or min_installment <= 0:
        return InstallmentSuggestion(1, total)
    count = int(total // min_installment)
    count = max(1, min(max_installments, count))
    return InstallmentSuggestion(count, total / count)


def build_schedule(
    total,
    count: int,
    down_payment=Decimal("0"),
    start: Optional[date] = None,
    payment_method: Optional[str] = None,
) -> list[Installment]:
    """Gera as parcelas mensais; a entrada (se houver) conta como a parcela 1.

    O valor restante é dividido em centavos e a última parcela absorve a diferença
    de arredondamento.
    """
    total = _dec(total)
    down_payment = _dec(down_payment)
    start = start or date.today()
    count = max(1, int(count))

    remaining = max(total - down_payment, Decimal("0"))
    num_remaining = count - 1 if down_payment > 0 else count
    per = (remaining / num_remaining).quantize(CENTAVOS, ROUND_HALF_UP) if num_remaining > 0 else Decimal("0")

    parcelas: list[Installment] = []
    if down_payment > 0:
        parcelas.append(Installment(number=1, value=down_payment, due_date=start, payment_method=payment_method))

    acumulado = Decimal("0")
    for i in range(1, num_remaining + 1):
        offset = i if down_payment > 0 else i - 1
        value = (remaining - acumulado).quantize(CENTAVOS, ROUND_HALF_UP) if i == num_remaining else per
        acumulado += value
        parcelas.append(
            Installment(
                number=i + 1 if down_payment > 0 else i,
                value=value,
                due_date=_add_months(start, offset),
                payment_method=payment_method,
            )
        )
    logger.debug("Parcelas geradas: %d (entrada=%s)", len(parcelas), down_payment)
    return parcelas


def schedule_total(installments: Iterable[Installment]) -> Decimal:
    """Novo valor final depois de editar parcelas manualmente."""
    return sum((p.value for p in installments), Decimal("0")).quantize(CENTAVOS, ROUND_HALF_UP)

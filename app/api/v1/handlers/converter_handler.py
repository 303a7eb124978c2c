"""
Калькулятор BGN ⇄ EUR по фиксированному курсу
"""
from fastapi import APIRouter, Query

from app.models.responses import ConversionResponse
from app.services.price_checker import bgn_to_eur, eur_to_bgn
from app.core.currency import FIXED_RATE
from app.core.enums import Currency

router = APIRouter(prefix="/convert", tags=["Calculator"])


@router.get("", response_model=ConversionResponse)
def convert(
    amount: float = Query(..., ge=0, lt=1_000_000, description="Сумма для пересчёта"),
    source: Currency = Query(Currency.BGN, description="Исходная валюта")
) -> ConversionResponse:
    """Пересчитать сумму в другую валюту с округлением до 2 знаков"""
    if source == Currency.BGN:
        converted, target = bgn_to_eur(amount), Currency.EUR
    else:
        converted, target = eur_to_bgn(amount), Currency.BGN

    return ConversionResponse(
        amount=amount,
        source=source,
        converted=converted,
        target=target,
        rate=FIXED_RATE
    )

"""
Проверка правильности пересчёта цены по фиксированному курсу
"""
from decimal import Decimal, ROUND_HALF_UP

from app.models.domain import PriceCheck, ScanResult
from app.core.currency import FIXED_RATE
from app.core.exceptions import NoPricesDetectedError
from app.core.logging import get_logger

logger = get_logger(__name__)

CENT = Decimal('0.01')
RATE = Decimal(str(FIXED_RATE))


def to_cents(value) -> Decimal:
    """Округление до стотинок/центов (half-up, как в официальных правилах пересчёта)"""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def bgn_to_eur(amount: float) -> float:
    """Пересчёт левов в евро с округлением до цента"""
    if amount < 0:
        raise ValueError("Amount cannot be negative")
    return float(to_cents(Decimal(str(amount)) / RATE))


def eur_to_bgn(amount: float) -> float:
    """Пересчёт евро в левы с округлением до стотинки"""
    if amount < 0:
        raise ValueError("Amount cannot be negative")
    return float(to_cents(Decimal(str(amount)) * RATE))


class PriceChecker:
    """
    Достраивает пару цен и сравнивает цену в евро с официальным пересчётом
    """

    def check(self, result: ScanResult) -> PriceCheck:
        """
        Проверка результата сканирования

        Args:
            result: Результат распознавания ценника

        Returns:
            PriceCheck с вердиктом

        Raises:
            NoPricesDetectedError: Если на ценнике нет ни одной цены
        """
        bgn = result.prices.bgn
        eur = result.prices.eur

        if not bgn and not eur:
            raise NoPricesDetectedError(
                "No prices detected in the image",
                details={"raw_text_length": len(result.text)}
            )

        # Одна цена: вторую считаем по курсу
        if not eur:
            eur = bgn_to_eur(bgn)
            logger.debug("Calculated EUR from BGN", bgn=bgn, eur=eur)
        elif not bgn:
            bgn = eur_to_bgn(eur)
            logger.debug("Calculated BGN from EUR", bgn=bgn, eur=eur)

        expected_eur = to_cents(Decimal(str(bgn)) / RATE)
        is_correct = to_cents(eur) == expected_eur

        logger.info(
            "Price conversion checked",
            bgn=bgn,
            eur=eur,
            expected_eur=str(expected_eur),
            is_correct=is_correct
        )

        return PriceCheck(
            bgn_price=bgn,
            eur_price=eur,
            expected_eur=float(expected_eur),
            is_correct=is_correct,
            confidence=result.confidence,
            raw_text=result.text
        )

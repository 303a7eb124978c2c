"""
Оценка доверия к результату распознавания ценника
"""
from typing import Tuple

from app.models.domain import PriceCandidate
from app.core.currency import CURRENCY_KEYWORDS, FIXED_RATE
from app.core.logging import get_logger

logger = get_logger(__name__)


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


class ConfidenceScorer:
    """
    Итоговая уверенность 15-95 из уверенности OCR, точности пересчёта,
    ключевых слов валют и признаков качества текста
    """

    BASE_MIN = 50.0
    BASE_MAX = 90.0
    SCORE_MIN = 15.0
    SCORE_MAX = 95.0

    # (максимальное отклонение от курса, бонус)
    RATIO_BONUSES: Tuple[Tuple[float, float], ...] = (
        (0.01, 20.0),
        (0.05, 15.0),
        (0.10, 10.0),
    )
    POOR_RATIO_BONUS = 5.0
    SINGLE_PRICE_BONUS = 8.0
    NO_PRICE_PENALTY = -20.0

    KEYWORD_BONUS = 3.0

    SHORT_TEXT_LENGTH = 3
    SHORT_TEXT_PENALTY = -15.0
    LONG_TEXT_LENGTH = 200
    LONG_TEXT_PENALTY = -5.0

    NOISE_MARKERS: Tuple[str, ...] = ('|||', '...', '???', '***', '###', '□', '■')
    NOISE_PENALTY = -10.0

    def score(self, candidate: PriceCandidate, text: str, ocr_confidence: float) -> float:
        """
        Расчёт итоговой уверенности

        Args:
            candidate: Найденная пара цен
            text: Распознанный текст
            ocr_confidence: Средняя уверенность OCR, %

        Returns:
            Уверенность в диапазоне [15, 95]
        """
        base = clamp(ocr_confidence, self.BASE_MIN, self.BASE_MAX)
        prices = self._price_adjustment(candidate)
        keywords = self._keyword_bonus(text)
        length = self._length_adjustment(text)
        noise = self._noise_adjustment(text)

        confidence = clamp(base + prices + keywords + length + noise, self.SCORE_MIN, self.SCORE_MAX)

        logger.debug(
            "Confidence scored",
            ocr_confidence=ocr_confidence,
            base=base,
            prices=prices,
            keywords=keywords,
            length=length,
            noise=noise,
            confidence=confidence
        )
        return confidence

    def _price_adjustment(self, candidate: PriceCandidate) -> float:
        # Нулевая цена (например, 0.01 лв → 0.00 €) считается ненайденной
        if candidate.bgn and candidate.eur:
            difference = abs(candidate.bgn / candidate.eur - FIXED_RATE)
            for max_difference, bonus in self.RATIO_BONUSES:
                if difference <= max_difference:
                    return bonus
            return self.POOR_RATIO_BONUS

        if candidate.bgn or candidate.eur:
            return self.SINGLE_PRICE_BONUS
        return self.NO_PRICE_PENALTY

    def _keyword_bonus(self, text: str) -> float:
        text_lower = text.lower()
        found = sum(1 for keyword in CURRENCY_KEYWORDS if keyword in text_lower)
        return found * self.KEYWORD_BONUS

    def _length_adjustment(self, text: str) -> float:
        if len(text) < self.SHORT_TEXT_LENGTH:
            return self.SHORT_TEXT_PENALTY
        if len(text) > self.LONG_TEXT_LENGTH:
            return self.LONG_TEXT_PENALTY
        return 0.0

    def _noise_adjustment(self, text: str) -> float:
        if any(marker in text for marker in self.NOISE_MARKERS):
            return self.NOISE_PENALTY
        return 0.0

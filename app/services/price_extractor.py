"""
Извлечение пары цен BGN/EUR из сырого OCR текста
"""
import re
from typing import List, Optional, Pattern, Tuple

from app.models.domain import PriceCandidate
from app.core.currency import (
    BGN_KEYWORDS,
    EUR_KEYWORDS,
    FIXED_RATE,
    MAX_PRICE,
    MIN_PRICE,
    compile_anchor,
    detect_context,
)
from app.core.logging import get_logger

logger = get_logger(__name__)

DECIMAL_NUMBER = r'\d+[.,]\d{1,2}'
WHOLE_NUMBER = r'(?<![\d.,])\d+(?![\d.,])'


def parse_amount(raw: str) -> Optional[float]:
    """
    Парсинг числа из текста с нормализацией десятичного разделителя

    Returns:
        Число в диапазоне (0, 10000) или None
    """
    try:
        value = float(raw.replace(',', '.'))
    except ValueError:
        return None

    if not MIN_PRICE < value < MAX_PRICE:
        return None
    return value


def bgn_ratio_matches(bgn: float, eur: float, tolerance: float) -> bool:
    """Соответствует ли отношение bgn/eur фиксированному курсу с допуском"""
    return abs(bgn / eur - FIXED_RATE) <= tolerance


class PriceExtractor:
    """
    Определяет, какое из чисел на ценнике - цена в левах, а какое - в евро.

    Порядок эвристик:
        1. Поиск пары чисел, отношение которых равно фиксированному курсу
        2. Одно число - валюта по ключевым словам или по величине
        3. Поиск чисел рядом с ключевыми словами валют

    Экстрактор не хранит состояние между вызовами и никогда не бросает исключений.
    """

    NUMBER_PATTERN = re.compile(DECIMAL_NUMBER)

    # Допуск 5% на шум OCR в цифрах
    RATIO_TOLERANCE = 0.05

    # Одиночное число больше порога считается ценой в левах
    AMBIGUOUS_THRESHOLD = 5.0

    # Сначала "число + валюта", затем "валюта + число"
    BGN_ANCHORS: Tuple[Pattern[str], ...] = (
        compile_anchor(DECIMAL_NUMBER, BGN_KEYWORDS, keyword_first=False),
        compile_anchor(DECIMAL_NUMBER, BGN_KEYWORDS, keyword_first=True),
    )
    EUR_ANCHORS: Tuple[Pattern[str], ...] = (
        compile_anchor(DECIMAL_NUMBER, EUR_KEYWORDS, keyword_first=False),
        compile_anchor(DECIMAL_NUMBER, EUR_KEYWORDS, keyword_first=True),
    )

    # Целые числа учитываются только рядом с валютой: "7 €", "лв 15"
    WHOLE_BGN_ANCHORS: Tuple[Pattern[str], ...] = (
        compile_anchor(WHOLE_NUMBER, BGN_KEYWORDS, keyword_first=False),
        compile_anchor(WHOLE_NUMBER, BGN_KEYWORDS, keyword_first=True),
    )
    WHOLE_EUR_ANCHORS: Tuple[Pattern[str], ...] = (
        compile_anchor(WHOLE_NUMBER, EUR_KEYWORDS, keyword_first=False),
        compile_anchor(WHOLE_NUMBER, EUR_KEYWORDS, keyword_first=True),
    )

    def extract(self, text: str) -> PriceCandidate:
        """
        Извлечение пары цен из распознанного текста

        Args:
            text: Распознанный текст (строки OCR, объединённые через \\n)

        Returns:
            PriceCandidate; поля могут отсутствовать, если цену определить не удалось
        """
        tokens = self.tokenize(text)
        bgn_anchors, eur_anchors = self.BGN_ANCHORS, self.EUR_ANCHORS
        logger.debug("Numeric tokens found", tokens=tokens)

        if not tokens:
            tokens = self._anchored_whole_numbers(text)
            bgn_anchors, eur_anchors = self.WHOLE_BGN_ANCHORS, self.WHOLE_EUR_ANCHORS
            if not tokens:
                logger.debug("No price tokens in text")
                return PriceCandidate()

        if len(tokens) == 1:
            return self._infer_single(tokens[0], text)

        pair = self._find_ratio_pair(tokens)
        if pair is not None:
            return pair

        logger.debug("No BGN/EUR ratio pair, falling back to currency context")
        return self._extract_by_context(text, bgn_anchors, eur_anchors)

    def tokenize(self, text: str) -> List[float]:
        """
        Все десятичные числа текста в допустимом диапазоне

        Returns:
            Уникальные значения по убыванию
        """
        values: List[float] = []
        for raw in self.NUMBER_PATTERN.findall(text):
            value = parse_amount(raw)
            if value is not None and value not in values:
                values.append(value)

        # Большие числа первыми пробуются как цена в левах
        return sorted(values, reverse=True)

    def _find_ratio_pair(self, tokens: List[float]) -> Optional[PriceCandidate]:
        """Первая пара, отношение которой совпадает с курсом (первое совпадение, не лучшее)"""
        for i, first in enumerate(tokens):
            for second in tokens[i + 1:]:
                if bgn_ratio_matches(first, second, self.RATIO_TOLERANCE):
                    logger.debug("BGN/EUR pair found", bgn=first, eur=second)
                    return PriceCandidate(bgn=first, eur=second)

                if bgn_ratio_matches(second, first, self.RATIO_TOLERANCE):
                    logger.debug("BGN/EUR pair found (reversed)", bgn=second, eur=first)
                    return PriceCandidate(bgn=second, eur=first)

        return None

    def _infer_single(self, value: float, text: str) -> PriceCandidate:
        """Определение валюты единственного числа и расчёт второй цены"""
        context = detect_context(text)

        if context.is_ambiguous:
            is_bgn = value > self.AMBIGUOUS_THRESHOLD
        else:
            is_bgn = context.has_bgn

        logger.debug(
            "Single price token",
            value=value,
            has_bgn=context.has_bgn,
            has_eur=context.has_eur,
            assumed="bgn" if is_bgn else "eur"
        )

        if is_bgn:
            return PriceCandidate(bgn=value, eur=round(value / FIXED_RATE, 2))
        return PriceCandidate(bgn=round(value * FIXED_RATE, 2), eur=value)

    def _extract_by_context(
        self,
        text: str,
        bgn_anchors: Tuple[Pattern[str], ...],
        eur_anchors: Tuple[Pattern[str], ...]
    ) -> PriceCandidate:
        """Цены, стоящие рядом с ключевыми словами валют; каждая валюта независимо"""
        return PriceCandidate(
            bgn=self._first_anchored(text, bgn_anchors),
            eur=self._first_anchored(text, eur_anchors),
        )

    @staticmethod
    def _first_anchored(text: str, patterns: Tuple[Pattern[str], ...]) -> Optional[float]:
        for pattern in patterns:
            match = pattern.search(text)
            if match:
                value = parse_amount(match.group(1))
                if value is not None:
                    return value
        return None

    def _anchored_whole_numbers(self, text: str) -> List[float]:
        """Целые числа рядом с валютой, уникальные по убыванию"""
        values: List[float] = []
        for pattern in self.WHOLE_BGN_ANCHORS + self.WHOLE_EUR_ANCHORS:
            for match in pattern.finditer(text):
                value = parse_amount(match.group(1))
                if value is not None and value not in values:
                    values.append(value)
        return sorted(values, reverse=True)

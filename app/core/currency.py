"""
Валютные константы и определение валютного контекста в тексте
"""
import re
from dataclasses import dataclass
from typing import Pattern, Tuple

# Официальный фиксированный курс: лева за 1 евро
FIXED_RATE = 1.95583

# Допустимый диапазон цены (не включая границы)
MIN_PRICE = 0.0
MAX_PRICE = 10000.0

BGN_KEYWORDS: Tuple[str, ...] = ('лв', 'bgn', 'лева')
EUR_KEYWORDS: Tuple[str, ...] = ('€', 'eur', 'евро', 'euro')

CURRENCY_KEYWORDS: Tuple[str, ...] = BGN_KEYWORDS + EUR_KEYWORDS


@dataclass(frozen=True)
class CurrencyContext:
    """Наличие валютных ключевых слов в тексте"""
    has_bgn: bool
    has_eur: bool

    @property
    def is_ambiguous(self) -> bool:
        return self.has_bgn == self.has_eur


def contains_keyword(text: str, keywords: Tuple[str, ...]) -> bool:
    """Регистронезависимый поиск любой подстроки из набора"""
    text_lower = text.lower()
    return any(keyword in text_lower for keyword in keywords)


def detect_context(text: str) -> CurrencyContext:
    """
    Определение валютного контекста текста

    Args:
        text: Распознанный текст

    Returns:
        CurrencyContext с флагами BGN/EUR
    """
    return CurrencyContext(
        has_bgn=contains_keyword(text, BGN_KEYWORDS),
        has_eur=contains_keyword(text, EUR_KEYWORDS),
    )


def keyword_alternation(keywords: Tuple[str, ...]) -> str:
    """Regex-альтернация из набора ключевых слов (длинные первыми)"""
    ordered = sorted(keywords, key=len, reverse=True)
    return '(?:' + '|'.join(re.escape(keyword) for keyword in ordered) + ')'


def compile_anchor(number: str, keywords: Tuple[str, ...], keyword_first: bool) -> Pattern[str]:
    """
    Паттерн "число + ключевое слово" или "ключевое слово + число"

    Args:
        number: Regex для числа (будет первой группой)
        keywords: Набор ключевых слов валюты
        keyword_first: Ключевое слово перед числом
    """
    alternation = keyword_alternation(keywords)
    if keyword_first:
        pattern = rf'{alternation}\s*({number})'
    else:
        pattern = rf'({number})\s*{alternation}'
    return re.compile(pattern, re.IGNORECASE)

"""
Настройка логирования с использованием structlog
"""
import logging
import sys
from typing import Any

import structlog


def setup_logging(log_level: str = "INFO", is_debug: bool = False) -> None:
    """
    Настройка структурированного логирования

    Args:
        log_level: Уровень логирования (DEBUG, INFO, WARNING, ERROR)
        is_debug: Режим отладки (читаемый вывод в консоль вместо JSON)
    """
    level = getattr(logging, log_level.upper())

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if is_debug:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.extend([
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False)
        ])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Получить structlog логгер для модуля"""
    return structlog.get_logger(name)

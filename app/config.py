"""
Конфигурация приложения через Pydantic Settings
"""
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Настройки приложения из переменных окружения"""

    # Application Settings
    APP_NAME: str = "bgn-eur-checker"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # CORS Settings
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:8081"

    # Remote PaddleOCR Settings
    OCR_API_URL: str = "http://localhost:8868/predict/ocr_system"
    OCR_HEALTH_URL: str = "http://localhost:8868/"
    OCR_LANGUAGE: str = "en"
    OCR_CONFIDENCE_THRESHOLD: float = 0.3
    OCR_REQUEST_TIMEOUT: float = 45.0
    OCR_HEALTH_TIMEOUT: float = 10.0
    OCR_VALIDATE_TIMEOUT: float = 15.0
    OCR_HEALTH_CHECK_INTERVAL: float = 120.0

    # Scan Settings
    MIN_SCAN_INTERVAL: float = 2.0
    MIN_IMAGE_BASE64_LENGTH: int = 1000

    # Image Settings
    MAX_IMAGE_SIZE_MB: int = 5
    MAX_IMAGE_DIMENSION: int = 1600

    # History Settings
    HISTORY_FILE: str = "data/scan_history.json"
    HISTORY_LIMIT: int = 100

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )

    @property
    def allowed_origins_list(self) -> List[str]:
        """Парсинг CORS origins из строки в список"""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]


# Singleton instance
_settings: Settings = None


def get_settings() -> Settings:
    """Получить настройки (singleton)"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings

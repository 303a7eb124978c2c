"""
Pydantic модели для входящих запросов
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ScanRequest(BaseModel):
    """Запрос на проверку ценника по фото"""
    image: str = Field(
        ...,
        description="Фото ценника в формате base64 (допускается data URL)",
        min_length=100
    )
    location: Optional[str] = Field(None, description="Место сканирования", max_length=200)

    @field_validator('image')
    @classmethod
    def validate_image_not_empty(cls, v: str) -> str:
        """Проверка что изображение не пустое"""
        if not v or not v.strip():
            raise ValueError("Image cannot be empty")
        return v.strip()

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "image": "/9j/4AAQSkZJRgABAQAAAQABAAD/2wBDAAgGBgcGBQgHBwcJCQgKDBQNDAsLDBkSEw8UHR8eHR...",
                "location": "Sofia, bul. Vitosha 15"
            }
        }
    )


class TextScanRequest(BaseModel):
    """Запрос на анализ уже распознанного текста"""
    text: str = Field(..., description="Распознанный текст ценника")
    confidence: float = Field(0.0, ge=0.0, le=100.0, description="Средняя уверенность OCR, %")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "text": "12.50 лв\n6.39 €",
                "confidence": 87.5
            }
        }
    )

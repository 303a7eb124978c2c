"""
Главный роутер API v1
Объединяет все handlers
"""
from fastapi import APIRouter

from app.api.v1.handlers import scan_handler, converter_handler, history_handler, health_handler

# Создаём главный роутер для v1
api_router = APIRouter(prefix="/api/v1")

# Подключаем все handlers
api_router.include_router(scan_handler.router)
api_router.include_router(converter_handler.router)
api_router.include_router(history_handler.router)
api_router.include_router(health_handler.router)

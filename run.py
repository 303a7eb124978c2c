"""
Скрипт для запуска сервиса проверки ценников
"""
import sys
from pathlib import Path

# Добавляем корень проекта в PYTHONPATH
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

if __name__ == "__main__":
    import uvicorn
    from app.config import get_settings
    from app.core.currency import FIXED_RATE
    from app.core.logging import setup_logging

    settings = get_settings()

    # Настраиваем логирование
    setup_logging(log_level=settings.LOG_LEVEL, is_debug=settings.DEBUG)

    print(f"🚀 Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    print(f"📡 Server: http://{settings.HOST}:{settings.PORT}")
    print(f"📚 Docs: http://{settings.HOST}:{settings.PORT}/docs")
    print(f"🔍 OCR API: {settings.OCR_API_URL}")
    print(f"💱 Rate: 1 EUR = {FIXED_RATE} BGN")
    print(f"🗂  History: {settings.HISTORY_FILE} (last {settings.HISTORY_LIMIT} scans)")
    print(f"🔧 Debug mode: {settings.DEBUG}")
    print()

    # Запускаем сервер
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )

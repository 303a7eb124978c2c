"""
FastAPI приложение - точка входа сервиса проверки ценников
"""
import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from app.config import get_settings
from app.core.logging import setup_logging, get_logger
from app.api.v1.router import api_router
from app.api.dependencies import get_history_service, get_ocr_client
from app.core.currency import FIXED_RATE

# Настройка логирования при импорте
settings = get_settings()
setup_logging(log_level=settings.LOG_LEVEL, is_debug=settings.DEBUG)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifecycle events для FastAPI
    Выполняется при старте и остановке приложения
    """
    # Startup
    logger.info(
        "Starting BGN/EUR Checker",
        app_name=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        fixed_rate=FIXED_RATE,
        ocr_api_url=settings.OCR_API_URL,
        history_file=settings.HISTORY_FILE
    )

    stats = get_history_service().stats()
    logger.info("Scan history loaded", total=stats.total, accuracy_percent=stats.accuracy_percent)

    # Начальное состояние OCR сервиса для /health
    ocr_client = get_ocr_client()
    if not await asyncio.to_thread(ocr_client.is_available):
        logger.warning("OCR service is unreachable at startup, scans will use fallback", url=settings.OCR_HEALTH_URL)

    yield

    # Shutdown
    ocr_client.close()
    logger.info("Shutting down BGN/EUR Checker")


# Создаём FastAPI приложение
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="BGN/EUR price tag checker: OCR, price pair extraction and conversion check",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Подключаем роутеры
app.include_router(api_router)


@app.get("/", include_in_schema=False)
async def root():
    """Редирект с корня на документацию"""
    return RedirectResponse(url="/docs")


@app.get("/ping", include_in_schema=False)
async def ping():
    """Простой ping endpoint"""
    return {"status": "pong"}


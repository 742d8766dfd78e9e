# app/main.py

import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import APIRouter, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

# Конфигурация и ядро
from app.core.config import settings as config
from app.core.exceptions import (
    http_exception_handler,
    rate_limit_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from app.core.limiter import limiter
from app.core.logging_config import setup_logging
from app.core.redis import redis_client
from app.db.session import Base, engine

# Роутеры FastAPI
from app.routers import (
    analytics, auth, balance, device, dispute, instagram_account, order,
    social_account, task, user, notification as notification_router,
)
from app.routers import admin as admin_router

# Фоновые задачи
from app.services.notification_cleanup import cleanup_old_notifications_task
from app.services.session import cleanup_expired_sessions_task
from app.services.statistics import refresh_stale_statistics_task

# --- Инициализация ---
logger = logging.getLogger(__name__)
scheduler = AsyncIOScheduler(timezone=config.SCHEDULER_TIMEZONE)

STARTUP_LOCK_KEY = "app_startup_lock"


# --- Lifespan Manager (запуск и остановка приложения) ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(f"Application lifespan startup ({config.ENVIRONMENT})...")

    if config.AUTO_CREATE_TABLES:
        # В production схема ведется миграциями alembic
        import app.models  # noqa: F401
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ensured via metadata.create_all().")

    # Надежная блокировка через Redis: планировщик запускается только в одном воркере
    is_main_worker = await redis_client.set(STARTUP_LOCK_KEY, "1", ex=60, nx=True)

    if is_main_worker:
        logger.info("This is the main worker. Starting scheduler...")
        if not scheduler.running:
            scheduler.add_job(refresh_stale_statistics_task, 'interval', minutes=config.STATISTICS_STALE_MINUTES)
            scheduler.add_job(cleanup_expired_sessions_task, 'interval', hours=1)
            scheduler.add_job(cleanup_old_notifications_task, 'cron', hour=5, minute=30)
            scheduler.start()
            logger.info("Scheduler started with background jobs.")
    else:
        logger.info("This is a secondary worker. Skipping scheduler setup.")

    yield

    # Код при остановке
    if is_main_worker:
        logger.info("Main worker shutting down...")
        if scheduler.running:
            scheduler.shutdown()
            logger.info("Scheduler shut down.")
        await redis_client.delete(STARTUP_LOCK_KEY)
    else:
        logger.info("Secondary worker shutting down.")


# --- Создание FastAPI приложения ---
app = FastAPI(
    title="SMM Panel Service",
    description="Backend for the SMM panel: orders, micro-tasks, balance and admin API",
    version="0.1.0",
    lifespan=lifespan,
)

app.state.limiter = limiter

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,  # Пользовательский фронтенд и админка
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Регистрация обработчиков исключений ---
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Подключение роутеров FastAPI ---
api_router = APIRouter(prefix="/api")

# Пользовательские эндпоинты
api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(user.router, tags=["Users"])
api_router.include_router(order.router, tags=["Orders"])
api_router.include_router(task.router, tags=["Tasks"])
api_router.include_router(balance.router, tags=["Balance"])
api_router.include_router(analytics.router, tags=["Analytics"])
api_router.include_router(device.router, tags=["Devices"])
api_router.include_router(social_account.router, tags=["Social Accounts"])
api_router.include_router(instagram_account.router, tags=["Instagram Accounts"])
api_router.include_router(dispute.router, tags=["Disputes"])
api_router.include_router(notification_router.router, tags=["Notifications"])

# Админские эндпоинты
api_router.include_router(admin_router.router, prefix="/admin", tags=["Admin"])

# Подключаем главный роутер к приложению
app.include_router(api_router)


@app.get("/health", tags=["Health"])
def health_check():
    return {"status": "ok", "environment": config.ENVIRONMENT}

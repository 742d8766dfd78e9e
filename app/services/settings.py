# app/services/settings.py

import logging

from sqlalchemy.orm import Session

from app.core.redis import redis_client
from app.crud import platform_setting as crud_platform_setting
from app.schemas.settings import PlatformSettings, PlatformSettingsUpdate

logger = logging.getLogger(__name__)

CACHE_KEY = "platform_settings"
CACHE_TTL_SECONDS = 3600  # Кешируем настройки на 1 час


def load_platform_settings(db: Session) -> PlatformSettings:
    """Настройки напрямую из БД, без Redis. Для синхронного кода и фоновых задач."""
    stored = crud_platform_setting.get_all(db)
    known = {key: value for key, value in stored.items() if key in PlatformSettings.model_fields}
    return PlatformSettings.model_validate({**PlatformSettings().model_dump(), **known})


async def get_platform_settings(db: Session) -> PlatformSettings:
    """
    Возвращает настройки платформы: сначала из Redis, затем из БД.
    Ключи, которых нет в БД, берутся из значений по умолчанию.
    """
    cached_settings = await redis_client.get(CACHE_KEY)
    if cached_settings:
        try:
            return PlatformSettings.model_validate_json(cached_settings)
        except ValueError as e:
            logger.warning(f"Failed to validate cached platform settings: {e}. Loading from DB.")

    platform_settings = load_platform_settings(db)

    await redis_client.set(CACHE_KEY, platform_settings.model_dump_json(), ex=CACHE_TTL_SECONDS)
    return platform_settings


async def update_platform_settings(db: Session, data: PlatformSettingsUpdate, updated_by: str) -> PlatformSettings:
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if changes:
        crud_platform_setting.set_values(db, changes, updated_by=updated_by)
        await redis_client.delete(CACHE_KEY)
        logger.info(f"Platform settings updated by {updated_by}: {changes}")
    return await get_platform_settings(db)

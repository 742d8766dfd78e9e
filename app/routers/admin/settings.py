# app/routers/admin/settings.py

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from app.dependencies import get_db, require_super_admin
from app.models.user import User
from app.schemas.settings import PlatformSettings, PlatformSettingsUpdate
from app.services import activity as activity_service
from app.services import settings as settings_service

router = APIRouter()


@router.get("", response_model=PlatformSettings)
async def get_settings(db: Session = Depends(get_db)):
    """[АДМИН] Текущие настройки платформы."""
    return await settings_service.get_platform_settings(db)


@router.put("", response_model=PlatformSettings)
async def update_settings(
    data: PlatformSettingsUpdate,
    request: Request,
    admin: User = Depends(require_super_admin),
    db: Session = Depends(get_db),
):
    """
    [АДМИН] Частичное обновление настроек. Только для супер-админа.
    Кеш настроек в Redis сбрасывается сразу.
    """
    result = await settings_service.update_platform_settings(db, data, updated_by=admin.id)
    activity_service.log_admin_action(db, request, admin, "settings", "update", None,
                                      data.model_dump(exclude_unset=True, exclude_none=True))
    return result

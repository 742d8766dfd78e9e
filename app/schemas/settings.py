# app/schemas/settings.py
from typing import Optional

from pydantic import BaseModel, Field


class PlatformSettings(BaseModel):
    """Настройки платформы, редактируемые супер-админом."""
    min_withdrawal_amount: float = 100.0
    task_cooldown_hours: int = 12
    auto_approve_task_submissions: bool = False
    registration_enabled: bool = True
    statistics_refresh_minutes: int = 15


class PlatformSettingsUpdate(BaseModel):
    min_withdrawal_amount: Optional[float] = Field(None, ge=0)
    task_cooldown_hours: Optional[int] = Field(None, ge=0, le=24 * 30)
    auto_approve_task_submissions: Optional[bool] = None
    registration_enabled: Optional[bool] = None
    statistics_refresh_minutes: Optional[int] = Field(None, ge=1, le=24 * 60)

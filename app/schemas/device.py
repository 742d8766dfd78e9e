# app/schemas/device.py
from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field


class DeviceCreate(BaseModel):
    name: str = Field(..., min_length=3, max_length=50)
    type: Literal["PC", "Laptop", "Mobile"]
    notes: Optional[str] = Field(None, max_length=500)


class DeviceNotificationSettings(BaseModel):
    email: Optional[bool] = None
    browser: Optional[bool] = None


class DeviceSettingsUpdate(BaseModel):
    auto_renew: Optional[bool] = None
    max_daily_tasks: Optional[int] = Field(None, ge=1, le=50)
    notifications: Optional[DeviceNotificationSettings] = None


class DeviceStatusUpdate(BaseModel):
    status: Literal["online", "offline", "busy"]


class Device(BaseModel):
    id: str
    name: str
    type: str
    status: str
    last_active: datetime | None = None
    settings: Dict[str, Any] | None = None
    notes: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class DeviceStats(BaseModel):
    device_id: str
    total_tasks: int
    approved_tasks: int
    earnings: float
    last_active: datetime | None = None
    last_activity: datetime | None = None

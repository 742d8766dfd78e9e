# app/services/device.py

import logging

from sqlalchemy.orm import Session

from app.core import constants as c
from app.core.exceptions import ApiError
from app.crud import device as crud_device
from app.crud import task as crud_task
from app.models.device import Device
from app.models.task import TaskExecution
from app.models.user import User
from app.schemas.device import DeviceCreate, DeviceSettingsUpdate, DeviceStats
from app.services.user import deep_merge
from app.utils.dates import utcnow
from app.utils.money import to_money

logger = logging.getLogger(__name__)


def register_device(db: Session, user: User, data: DeviceCreate) -> Device:
    device = crud_device.create_device(
        db, user_id=user.id, name=data.name, type=data.type,
        settings=dict(c.DEFAULT_DEVICE_SETTINGS), notes=data.notes,
    )
    logger.info(f"Device {device.id} ({device.type}) registered by user {user.id}")
    return device


def list_devices(db: Session, user: User, status: str | None = None) -> list[Device]:
    return crud_device.get_user_devices(db, user.id, status=status)


def get_device(db: Session, user: User, device_id: str) -> Device:
    device = crud_device.get_user_device(db, user.id, device_id)
    if device is None:
        raise ApiError.not_found("Device not found")
    return device


def update_settings(db: Session, user: User, device_id: str, data: DeviceSettingsUpdate) -> Device:
    device = get_device(db, user, device_id)
    current = deep_merge(c.DEFAULT_DEVICE_SETTINGS, device.settings or {})
    device.settings = deep_merge(current, data.model_dump(exclude_none=True))
    db.commit()
    db.refresh(device)
    return device


def update_status(db: Session, user: User, device_id: str, status: str) -> Device:
    device = get_device(db, user, device_id)
    device.status = status
    if status in ("online", "busy"):
        device.last_active = utcnow()
    db.commit()
    db.refresh(device)
    return device


def delete_device(db: Session, user: User, device_id: str) -> None:
    device = get_device(db, user, device_id)
    crud_device.delete_device(db, device)
    logger.info(f"Device {device_id} deleted by user {user.id}")


def get_stats(db: Session, user: User, device_id: str) -> DeviceStats:
    device = get_device(db, user, device_id)
    totals = crud_task.execution_totals(db, TaskExecution.device_id, device.id)
    return DeviceStats(
        device_id=device.id,
        total_tasks=totals["total_tasks"],
        approved_tasks=totals["approved_tasks"],
        earnings=to_money(totals["earnings"]),
        last_active=device.last_active,
        last_activity=totals["last_activity"],
    )

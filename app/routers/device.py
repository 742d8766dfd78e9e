# app/routers/device.py

from typing import List, Literal

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.dependencies import get_current_user, get_db
from app.models.user import User
from app.schemas.device import Device, DeviceCreate, DeviceSettingsUpdate, DeviceStats, DeviceStatusUpdate
from app.services import device as device_service

router = APIRouter(prefix="/devices")


@router.post("", response_model=Device, status_code=status.HTTP_201_CREATED)
def register_device(data: DeviceCreate, current_user: User = Depends(get_current_user),
                    db: Session = Depends(get_db)):
    return device_service.register_device(db, current_user, data)


@router.get("", response_model=List[Device])
def list_devices(
    status_filter: Literal["online", "offline", "busy"] | None = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return device_service.list_devices(db, current_user, status_filter)


@router.get("/{device_id}", response_model=Device)
def get_device(device_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return device_service.get_device(db, current_user, device_id)


@router.put("/{device_id}/settings", response_model=Device)
def update_device_settings(
    device_id: str,
    data: DeviceSettingsUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Частичное обновление настроек: переданные ключи накладываются на текущие."""
    return device_service.update_settings(db, current_user, device_id, data)


@router.put("/{device_id}/status", response_model=Device)
def update_device_status(
    device_id: str,
    data: DeviceStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return device_service.update_status(db, current_user, device_id, data.status)


@router.get("/{device_id}/stats", response_model=DeviceStats)
def get_device_stats(device_id: str, current_user: User = Depends(get_current_user),
                     db: Session = Depends(get_db)):
    return device_service.get_stats(db, current_user, device_id)


@router.delete("/{device_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_device(device_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    device_service.delete_device(db, current_user, device_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

# app/crud/device.py
from sqlalchemy.orm import Session

from app.models.device import Device


def create_device(db: Session, user_id: str, name: str, type: str, settings: dict,
                  notes: str | None = None) -> Device:
    db_device = Device(user_id=user_id, name=name, type=type, settings=settings, notes=notes, status="offline")
    db.add(db_device)
    db.commit()
    db.refresh(db_device)
    return db_device

def get_user_device(db: Session, user_id: str, device_id: str) -> Device | None:
    return db.query(Device).filter(Device.id == device_id, Device.user_id == user_id).first()

def get_user_devices(db: Session, user_id: str, status: str | None = None) -> list[Device]:
    query = db.query(Device).filter(Device.user_id == user_id)
    if status:
        query = query.filter(Device.status == status)
    return query.order_by(Device.created_at.desc()).all()

def delete_device(db: Session, device: Device) -> None:
    db.delete(device)
    db.commit()

# app/schemas/notification.py
from datetime import datetime

from pydantic import BaseModel

from app.schemas.common import PaginatedResponse


class Notification(BaseModel):
    id: str
    type: str
    title: str
    message: str | None = None
    related_entity_id: str | None = None
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class PaginatedNotifications(PaginatedResponse[Notification]):
    pass

# app/models/notification.py
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from app.db.session import Base, generate_uuid
from app.utils.dates import utcnow


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Тип уведомления: 'order_status_update', 'task_approved', 'dispute_resolved', 'balance_update', etc.
    type = Column(String(50), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=True)

    # ID связанной сущности (например, ID заказа или транзакции)
    related_entity_id = Column(String(36), nullable=True)

    is_read = Column(Boolean, default=False, nullable=False, server_default='false')
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User")

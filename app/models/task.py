# app/models/task.py

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from app.db.session import Base, generate_uuid
from app.utils.dates import utcnow


class Task(Base):
    """Единица работы для исполнителей. Обычно порождается заказом."""
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    # Заказчик (task_giver)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="SET NULL"), nullable=True, index=True)

    type = Column(String(20), nullable=False, index=True)
    platform = Column(String(20), nullable=False, index=True)
    target_url = Column(String(500), nullable=False)
    quantity = Column(Integer, nullable=False)
    remaining_quantity = Column(Integer, nullable=False)
    completed_count = Column(Integer, default=0, nullable=False)
    rate = Column(Numeric(12, 2), nullable=False)
    status = Column(String(20), default="available", nullable=False, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    order = relationship("Order", back_populates="tasks")
    executions = relationship("TaskExecution", back_populates="task", cascade="all, delete-orphan", passive_deletes=True)


class TaskExecution(Base):
    """Выполнение задания конкретным исполнителем."""
    __tablename__ = "task_executions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    task_id = Column(String(36), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    device_id = Column(String(36), ForeignKey("devices.id", ondelete="SET NULL"), nullable=True)
    social_account_id = Column(String(36), ForeignKey("social_accounts.id", ondelete="SET NULL"), nullable=True)

    status = Column(String(20), default="in_progress", nullable=False, index=True)
    proof = Column(JSON, nullable=True)
    earnings = Column(Numeric(12, 2), default=0, nullable=False)

    started_at = Column(DateTime, default=utcnow, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    cooldown_ends_at = Column(DateTime, nullable=True)

    reviewed_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    rejection_reason = Column(Text, nullable=True)

    task = relationship("Task", back_populates="executions")
    device = relationship("Device")
    social_account = relationship("SocialAccount")

# app/models/order.py

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from app.db.session import Base, generate_uuid
from app.utils.dates import utcnow


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    platform = Column(String(20), nullable=False, index=True)
    service = Column(String(20), nullable=False)
    target_url = Column(String(500), nullable=False)
    quantity = Column(Integer, nullable=False)
    start_count = Column(Integer, default=0, nullable=False)
    # Уменьшается по мере выполнения, никогда не ниже нуля
    remaining_count = Column(Integer, nullable=False)
    status = Column(String(20), default="pending", nullable=False, index=True)
    speed = Column(String(20), default="normal", nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)

    admin_notes = Column(Text, nullable=True)
    rejection_reason = Column(Text, nullable=True)
    refund_reason = Column(Text, nullable=True)
    reviewed_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="orders", foreign_keys=[user_id])
    reviewer = relationship("User", foreign_keys=[reviewed_by])
    tasks = relationship("Task", back_populates="order")

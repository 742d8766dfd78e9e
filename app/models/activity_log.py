# app/models/activity_log.py

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text

from app.db.session import Base, generate_uuid
from app.utils.dates import utcnow


class ActivityLog(Base):
    """Журнал действий пользователей и администраторов."""
    __tablename__ = "activity_logs"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    # user / admin
    scope = Column(String(10), default="user", nullable=False, index=True)
    resource = Column(String(50), nullable=False)
    action = Column(String(50), nullable=False)
    resource_id = Column(String(36), nullable=True)
    details = Column(JSON, nullable=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

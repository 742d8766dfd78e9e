# app/models/platform_setting.py

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String

from app.db.session import Base
from app.utils.dates import utcnow


class PlatformSetting(Base):
    __tablename__ = "platform_settings"

    key = Column(String(100), primary_key=True)
    value = Column(JSON, nullable=True)
    updated_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

# app/models/user.py

from sqlalchemy import JSON, Boolean, Column, DateTime, Numeric, String
from sqlalchemy.orm import relationship

from app.db.session import Base, generate_uuid
from app.utils.dates import utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(50), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(20), nullable=True)

    # user / moderator / admin / super_admin
    role = Column(String(20), default="user", nullable=False, server_default="user", index=True)
    # task_doer / task_giver
    user_mode = Column(String(20), default="task_doer", nullable=False, server_default="task_doer")
    balance = Column(Numeric(12, 2), default=0, nullable=False, server_default="0")
    settings = Column(JSON, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False, server_default="true")
    last_login = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    sessions = relationship("Session", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    admin_sessions = relationship("AdminSession", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    orders = relationship("Order", back_populates="user", foreign_keys="Order.user_id")
    devices = relationship("Device", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)
    social_accounts = relationship("SocialAccount", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

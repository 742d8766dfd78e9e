# app/models/social_account.py

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, Numeric, String, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.session import Base, generate_uuid
from app.utils.dates import utcnow


class SocialAccount(Base):
    """Подключенный аккаунт соцсети. Instagram-аккаунты - это записи с platform='instagram'."""
    __tablename__ = "social_accounts"
    __table_args__ = (UniqueConstraint("platform", "username", name="uq_social_accounts_platform_username"),)

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    platform = Column(String(20), nullable=False, index=True)
    username = Column(String(100), nullable=False)
    # Пароль внутри хранится только в виде bcrypt-хеша
    credentials = Column(JSON, nullable=True)
    status = Column(String(20), default="active", nullable=False)
    last_checked = Column(DateTime, nullable=True)
    settings = Column(JSON, nullable=True)

    total_followed = Column(Integer, default=0, nullable=False)
    total_likes = Column(Integer, default=0, nullable=False)
    total_views = Column(Integer, default=0, nullable=False)
    total_subscriptions = Column(Integer, default=0, nullable=False)
    total_earnings = Column(Numeric(12, 2), default=0, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="social_accounts")

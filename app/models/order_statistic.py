# app/models/order_statistic.py

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, Numeric, String, UniqueConstraint

from app.db.session import Base, generate_uuid
from app.utils.dates import utcnow


class OrderStatistic(Base):
    """Предрасчитанная сводка по заказам пользователя для пары (платформа, период)."""
    __tablename__ = "order_statistics"
    __table_args__ = (
        UniqueConstraint("user_id", "platform", "timeframe", name="uq_order_statistics_user_platform_timeframe"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    platform = Column(String(20), nullable=False)
    timeframe = Column(String(5), nullable=False)

    active_orders = Column(Integer, default=0, nullable=False)
    completed_orders = Column(Integer, default=0, nullable=False)
    total_orders = Column(Integer, default=0, nullable=False)
    total_spent = Column(Numeric(12, 2), default=0, nullable=False)

    active_orders_growth = Column(Float, default=0, nullable=False)
    completed_orders_growth = Column(Float, default=0, nullable=False)
    total_orders_growth = Column(Float, default=0, nullable=False)
    total_spent_growth = Column(Float, default=0, nullable=False)

    last_calculated_at = Column(DateTime, default=utcnow, nullable=False)

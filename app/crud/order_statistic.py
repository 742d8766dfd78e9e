# app/crud/order_statistic.py
from datetime import datetime
from sqlalchemy.orm import Session

from app.models.order_statistic import OrderStatistic


def get_statistic(db: Session, user_id: str, platform: str, timeframe: str) -> OrderStatistic | None:
    return db.query(OrderStatistic).filter_by(user_id=user_id, platform=platform, timeframe=timeframe).first()

def upsert_statistic(db: Session, user_id: str, platform: str, timeframe: str, values: dict) -> OrderStatistic:
    """Обновляет строку по уникальному ключу (user, platform, timeframe) или создает новую."""
    stat = get_statistic(db, user_id, platform, timeframe)
    if stat is None:
        stat = OrderStatistic(user_id=user_id, platform=platform, timeframe=timeframe)
        db.add(stat)
    for key, value in values.items():
        setattr(stat, key, value)
    db.commit()
    db.refresh(stat)
    return stat

def get_stale_statistics(db: Session, older_than: datetime) -> list[OrderStatistic]:
    return db.query(OrderStatistic).filter(OrderStatistic.last_calculated_at < older_than).all()

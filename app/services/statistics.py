# app/services/statistics.py

import logging
from datetime import timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core import constants as c
from app.crud import order_statistic as crud_statistic
from app.db.session import SessionLocal
from app.models.order import Order
from app.models.order_statistic import OrderStatistic
from app.services import settings as settings_service
from app.utils.dates import PERIOD_DAYS, utcnow
from app.utils.money import to_money

logger = logging.getLogger(__name__)

# Эти заказы не считаются потраченными деньгами: средства вернулись на баланс
NOT_SPENT_STATUSES = (c.ORDER_CANCELLED, c.ORDER_REFUNDED)


def growth(current, previous) -> float:
    """Рост в процентах относительно предыдущего окна."""
    current, previous = float(current), float(previous)
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return round((current - previous) / previous * 100, 2)


def _window_stats(db: Session, user_id: str, platform: str, start, end) -> dict:
    base = db.query(Order).filter(
        Order.user_id == user_id,
        Order.platform == platform,
        Order.created_at >= start,
        Order.created_at < end,
    )
    spent = base.filter(Order.status.notin_(NOT_SPENT_STATUSES)).with_entities(
        func.coalesce(func.sum(Order.amount), 0)
    ).scalar()
    return {
        "active_orders": base.filter(Order.status.in_(c.ACTIVE_ORDER_STATUSES)).count(),
        "completed_orders": base.filter(Order.status == c.ORDER_COMPLETED).count(),
        "total_orders": base.count(),
        "total_spent": to_money(spent),
    }


def calculate_and_update_stats(db: Session, user_id: str, platform: str, timeframe: str) -> OrderStatistic:
    """Пересчитывает сводку за окно и рост относительно предыдущего окна той же длины."""
    days = PERIOD_DAYS[timeframe]
    now = utcnow()
    start = now - timedelta(days=days)
    previous_start = start - timedelta(days=days)

    current = _window_stats(db, user_id, platform, start, now + timedelta(seconds=1))
    previous = _window_stats(db, user_id, platform, previous_start, start)

    values = dict(current)
    for key in ("active_orders", "completed_orders", "total_orders", "total_spent"):
        values[f"{key}_growth"] = growth(current[key], previous[key])
    values["last_calculated_at"] = now

    return crud_statistic.upsert_statistic(db, user_id, platform, timeframe, values)


def stale_threshold(db: Session):
    """Сводки, посчитанные раньше этого момента, устарели (настройка statistics_refresh_minutes)."""
    minutes = settings_service.load_platform_settings(db).statistics_refresh_minutes
    return utcnow() - timedelta(minutes=minutes)


def get_stats(db: Session, user_id: str, platform: str, timeframe: str) -> OrderStatistic:
    """Отдает сохраненную сводку, пересчитывая ее, если ее нет или она устарела."""
    stat = crud_statistic.get_statistic(db, user_id, platform, timeframe)
    stale_before = stale_threshold(db)
    if stat is None or stat.last_calculated_at < stale_before:
        stat = calculate_and_update_stats(db, user_id, platform, timeframe)
    return stat


def refresh_user_platform_stats(db: Session, user_id: str, platform: str) -> None:
    """После нового заказа пересчитываем уже существующие сводки по этой платформе."""
    existing = db.query(OrderStatistic).filter_by(user_id=user_id, platform=platform).all()
    for stat in existing:
        calculate_and_update_stats(db, user_id, platform, stat.timeframe)


def refresh_stale_statistics_task():
    """Фоновая задача: пересчитывает все устаревшие сводки по заказам."""
    logger.info("--- Starting scheduled job: Refresh Order Statistics ---")
    with SessionLocal() as db:
        try:
            stale_before = stale_threshold(db)
            stale = crud_statistic.get_stale_statistics(db, stale_before)
            for stat in stale:
                calculate_and_update_stats(db, stat.user_id, stat.platform, stat.timeframe)
            logger.info(f"Recalculated {len(stale)} order statistics rows.")
        except Exception:
            logger.error("An error occurred during order statistics refresh", exc_info=True)
            db.rollback()
    logger.info("--- Finished scheduled job: Refresh Order Statistics ---")

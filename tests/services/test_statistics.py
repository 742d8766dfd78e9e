# tests/services/test_statistics.py

from datetime import timedelta
from decimal import Decimal

import pytest

from app.crud import platform_setting as crud_platform_setting
from app.models.order import Order
from app.models.user import User
from app.services import statistics as statistics_service
from app.utils.dates import utcnow
from tests.conftest import make_user


@pytest.mark.parametrize("current, previous, expected", [
    (10, 0, 100.0),
    (0, 0, 0.0),
    (15, 10, 50.0),
    (5, 10, -50.0),
    (Decimal("20.00"), Decimal("30.00"), -33.33),
])
def test_growth(current, previous, expected):
    assert statistics_service.growth(current, previous) == expected


def add_order(db_session, user: User, amount: str, status: str, days_ago: int = 0) -> Order:
    order = Order(
        user_id=user.id, platform="instagram", service="likes", target_url="https://instagram.com/p/x",
        quantity=10, remaining_count=10, status=status, speed="normal", amount=Decimal(amount),
        created_at=utcnow() - timedelta(days=days_ago),
    )
    db_session.add(order)
    db_session.commit()
    return order


def test_window_statistics_and_growth(db_session):
    user = make_user(db_session, "stats@example.com", "stats")
    add_order(db_session, user, "10.00", "pending")
    add_order(db_session, user, "20.00", "completed", days_ago=2)
    add_order(db_session, user, "50.00", "refunded", days_ago=3)
    add_order(db_session, user, "40.00", "completed", days_ago=10)

    stat = statistics_service.calculate_and_update_stats(db_session, user.id, "instagram", "7d")

    assert stat.total_orders == 3
    assert stat.active_orders == 1
    assert stat.completed_orders == 1
    # Возвращенный заказ не входит в потраченное
    assert stat.total_spent == Decimal("30.00")
    assert stat.total_orders_growth == 200.0
    assert stat.total_spent_growth == -25.0


def test_cached_statistics_are_reused(db_session, mocker):
    user = make_user(db_session, "cached@example.com", "cached")
    first = statistics_service.get_stats(db_session, user.id, "youtube", "30d")
    recalculate = mocker.spy(statistics_service, "calculate_and_update_stats")

    second = statistics_service.get_stats(db_session, user.id, "youtube", "30d")

    assert second.id == first.id
    recalculate.assert_not_called()


def test_refresh_interval_follows_platform_setting(db_session, mocker):
    user = make_user(db_session, "fresh@example.com", "fresh")
    stat = statistics_service.get_stats(db_session, user.id, "instagram", "7d")
    stat.last_calculated_at = utcnow() - timedelta(minutes=5)
    db_session.commit()
    recalculate = mocker.spy(statistics_service, "calculate_and_update_stats")

    # По умолчанию сводка живет 15 минут
    statistics_service.get_stats(db_session, user.id, "instagram", "7d")
    recalculate.assert_not_called()

    crud_platform_setting.set_values(db_session, {"statistics_refresh_minutes": 2})
    statistics_service.get_stats(db_session, user.id, "instagram", "7d")
    recalculate.assert_called_once()

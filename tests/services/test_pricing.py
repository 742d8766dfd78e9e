# tests/services/test_pricing.py

from decimal import Decimal

import pytest

from app.services.order import calculate_order_amount, calculate_task_rate


@pytest.mark.parametrize("service, quantity, speed, expected", [
    ("likes", 100, "normal", "50.00"),
    ("views", 1000, "express", "210.00"),
    ("followers", 5000, "normal", "4750.00"),
    ("followers", 10000, "fast", "9005.00"),
    ("comments", 50000, "normal", "85000.00"),
])
def test_order_amount(service, quantity, speed, expected):
    assert calculate_order_amount(service, quantity, speed) == Decimal(expected)


def test_discount_applies_only_once():
    # 60000 подписчиков попадают только в самый крупный порог
    assert calculate_order_amount("subscribers", 60000) == Decimal("51000.00")


@pytest.mark.parametrize("service, quantity, expected", [
    ("likes", 10, "0.30"),
    ("likes", 5000, "0.33"),
    ("followers", 10000, "0.69"),
    ("followers", 50000, "0.72"),
    ("views", 100, "0.12"),
])
def test_task_rate(service, quantity, expected):
    assert calculate_task_rate(service, quantity) == Decimal(expected)


def test_unknown_service_uses_default_rate():
    assert calculate_task_rate("shares", 10) == Decimal("0.10")

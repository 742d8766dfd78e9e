# tests/services/test_helpers.py

from datetime import datetime
from decimal import Decimal

from app.core.constants import DEFAULT_USER_SETTINGS
from app.services.user import deep_merge
from app.utils.dates import normalize_period, period_start
from app.utils.money import mask_card_number, to_money


def test_deep_merge_keeps_untouched_keys():
    merged = deep_merge(DEFAULT_USER_SETTINGS, {"notifications": {"email": False}, "language": "tr"})

    assert merged["notifications"] == {"email": False, "browser": True}
    assert merged["privacy"] == DEFAULT_USER_SETTINGS["privacy"]
    assert merged["language"] == "tr"
    # Исходный словарь не меняется
    assert DEFAULT_USER_SETTINGS["notifications"]["email"] is True


def test_to_money_rounds_half_up():
    assert to_money(0.125) == Decimal("0.13")
    assert to_money("10") == Decimal("10.00")
    assert to_money(None) == Decimal("0.00")


def test_mask_card_number():
    assert mask_card_number("4111 1111 1111 1234") == "**** **** **** 1234"
    assert mask_card_number("12") == "****"


def test_periods():
    now = datetime(2024, 3, 31)

    assert period_start("7d", now) == datetime(2024, 3, 24)
    assert period_start("bogus", now) == datetime(2024, 3, 1)
    assert normalize_period(None) == "30d"
    assert normalize_period("1y") == "1y"

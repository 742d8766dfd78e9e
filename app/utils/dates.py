# app/utils/dates.py
from datetime import datetime, timedelta, timezone

# Период аналитики -> количество дней
PERIOD_DAYS = {"7d": 7, "30d": 30, "90d": 90, "1y": 365}
DEFAULT_PERIOD = "30d"


def utcnow() -> datetime:
    """Текущее время в UTC без tzinfo (так хранятся все даты в БД)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def period_start(period: str, now: datetime | None = None) -> datetime:
    """Начало окна для периода вида 7d/30d/90d/1y. Неизвестный период трактуется как 30d."""
    days = PERIOD_DAYS.get(period, PERIOD_DAYS[DEFAULT_PERIOD])
    return (now or utcnow()) - timedelta(days=days)


def normalize_period(period: str | None) -> str:
    return period if period in PERIOD_DAYS else DEFAULT_PERIOD

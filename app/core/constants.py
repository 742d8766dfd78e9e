# app/core/constants.py
"""Закрытые наборы значений для статусов, типов и ролей."""

from decimal import Decimal

# --- Пользователи ---
ROLE_USER = "user"
ROLE_MODERATOR = "moderator"
ROLE_ADMIN = "admin"
ROLE_SUPER_ADMIN = "super_admin"
USER_ROLES = (ROLE_USER, ROLE_MODERATOR, ROLE_ADMIN, ROLE_SUPER_ADMIN)
ADMIN_ROLES = (ROLE_MODERATOR, ROLE_ADMIN, ROLE_SUPER_ADMIN)

MODE_TASK_DOER = "task_doer"
MODE_TASK_GIVER = "task_giver"
USER_MODES = (MODE_TASK_DOER, MODE_TASK_GIVER)

DEFAULT_USER_SETTINGS = {
    "notifications": {"email": True, "browser": True},
    "privacy": {"hide_profile": False, "hide_stats": False},
    "language": "en",
}
LANGUAGES = ("en", "tr")

# --- Заказы ---
PLATFORMS = ("instagram", "youtube")
SERVICES = ("likes", "followers", "views", "comments", "subscribers")
SPEEDS = ("normal", "fast", "express")

ORDER_PENDING = "pending"
ORDER_PROCESSING = "processing"
ORDER_COMPLETED = "completed"
ORDER_FAILED = "failed"
ORDER_CANCELLED = "cancelled"
ORDER_REFUNDED = "refunded"
ORDER_STATUSES = (ORDER_PENDING, ORDER_PROCESSING, ORDER_COMPLETED, ORDER_FAILED, ORDER_CANCELLED, ORDER_REFUNDED)
ACTIVE_ORDER_STATUSES = (ORDER_PENDING, ORDER_PROCESSING)

BASE_PRICES = {
    "likes": Decimal("0.5"),
    "followers": Decimal("1.0"),
    "views": Decimal("0.2"),
    "comments": Decimal("2.0"),
    "subscribers": Decimal("1.0"),
}
# (порог количества, множитель) от большего к меньшему
BULK_DISCOUNTS = (
    (50000, Decimal("0.85")),
    (10000, Decimal("0.90")),
    (5000, Decimal("0.95")),
)
SPEED_PREMIUMS = {"normal": Decimal("0"), "fast": Decimal("5"), "express": Decimal("10")}

# --- Задания ---
TASK_LIKE = "like"
TASK_FOLLOW = "follow"
TASK_VIEW = "view"
TASK_SUBSCRIBE = "subscribe"
TASK_TYPES = (TASK_LIKE, TASK_FOLLOW, TASK_VIEW, TASK_SUBSCRIBE)
ONE_TIME_TASK_TYPES = (TASK_FOLLOW, TASK_SUBSCRIBE)

SERVICE_TO_TASK_TYPE = {
    "likes": TASK_LIKE,
    "followers": TASK_FOLLOW,
    "views": TASK_VIEW,
    "subscribers": TASK_SUBSCRIBE,
    "comments": TASK_LIKE,
}
TASK_RATES = {
    "likes": Decimal("0.3"),
    "followers": Decimal("0.6"),
    "views": Decimal("0.12"),
    "comments": Decimal("1.2"),
    "subscribers": Decimal("0.6"),
}
DEFAULT_TASK_RATE = Decimal("0.1")
TASK_RATE_BONUSES = (
    (50000, Decimal("1.2")),
    (10000, Decimal("1.15")),
    (5000, Decimal("1.1")),
)

TASK_AVAILABLE = "available"
TASK_IN_PROGRESS = "in_progress"
TASK_COMPLETED = "completed"
TASK_REJECTED = "rejected"
TASK_STATUSES = (TASK_AVAILABLE, TASK_IN_PROGRESS, TASK_COMPLETED, TASK_REJECTED)

EXECUTION_IN_PROGRESS = "in_progress"
EXECUTION_COMPLETED = "completed"
EXECUTION_APPROVED = "approved"
EXECUTION_REJECTED = "rejected"
EXECUTION_STATUSES = (EXECUTION_IN_PROGRESS, EXECUTION_COMPLETED, EXECUTION_APPROVED, EXECUTION_REJECTED)

# --- Транзакции ---
TX_DEPOSIT = "deposit"
TX_WITHDRAWAL = "withdrawal"
TX_ORDER_PAYMENT = "order_payment"
TX_TASK_EARNING = "task_earning"
TX_REFUND = "refund"
TRANSACTION_TYPES = (TX_DEPOSIT, TX_WITHDRAWAL, TX_ORDER_PAYMENT, TX_TASK_EARNING, TX_REFUND)

TX_PENDING = "pending"
TX_COMPLETED = "completed"
TX_FAILED = "failed"
TRANSACTION_STATUSES = (TX_PENDING, TX_COMPLETED, TX_FAILED)

METHOD_BANK_TRANSFER = "bank_transfer"
METHOD_CREDIT_CARD = "credit_card"
METHOD_CRYPTO = "crypto"
METHOD_BALANCE = "balance"
DEPOSIT_METHODS = (METHOD_BANK_TRANSFER, METHOD_CREDIT_CARD, METHOD_CRYPTO)
WITHDRAWAL_METHODS = (METHOD_BANK_TRANSFER, METHOD_CRYPTO)
TRANSACTION_METHODS = (METHOD_BANK_TRANSFER, METHOD_CREDIT_CARD, METHOD_CRYPTO, METHOD_BALANCE)

# --- Устройства и соцаккаунты ---
DEVICE_TYPES = ("PC", "Laptop", "Mobile")
DEVICE_STATUSES = ("online", "offline", "busy")
DEFAULT_DEVICE_SETTINGS = {
    "auto_renew": False,
    "max_daily_tasks": 10,
    "notifications": {"email": True, "browser": True},
}

ACCOUNT_STATUSES = ("active", "inactive", "limited")

# --- Споры ---
DISPUTE_TYPES = ("order_issue", "payment_issue", "technical_issue", "other")
DISPUTE_OPEN = "open"
DISPUTE_UNDER_REVIEW = "under_review"
DISPUTE_RESOLVED = "resolved"
DISPUTE_CLOSED = "closed"
DISPUTE_STATUSES = (DISPUTE_OPEN, DISPUTE_UNDER_REVIEW, DISPUTE_RESOLVED, DISPUTE_CLOSED)

# --- Статистика ---
STAT_TIMEFRAMES = ("7d", "30d", "90d", "1y")

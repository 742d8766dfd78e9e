# app/core/lifecycle.py
"""
Таблицы допустимых переходов статусов.
Любая смена статуса заказа, задания, выполнения, спора или транзакции проходит через ensure_transition.
"""

import logging

from app.core import constants as c
from app.core.exceptions import ApiError

logger = logging.getLogger(__name__)

ORDER_TRANSITIONS = {
    c.ORDER_PENDING: {c.ORDER_PROCESSING, c.ORDER_CANCELLED, c.ORDER_FAILED},
    c.ORDER_PROCESSING: {c.ORDER_COMPLETED, c.ORDER_FAILED, c.ORDER_REFUNDED},
    c.ORDER_COMPLETED: {c.ORDER_REFUNDED},
    c.ORDER_FAILED: set(),
    c.ORDER_CANCELLED: set(),
    c.ORDER_REFUNDED: set(),
}

TASK_TRANSITIONS = {
    c.TASK_AVAILABLE: {c.TASK_IN_PROGRESS, c.TASK_COMPLETED, c.TASK_REJECTED},
    c.TASK_IN_PROGRESS: {c.TASK_AVAILABLE, c.TASK_COMPLETED, c.TASK_REJECTED},
    c.TASK_COMPLETED: set(),
    c.TASK_REJECTED: set(),
}

EXECUTION_TRANSITIONS = {
    c.EXECUTION_IN_PROGRESS: {c.EXECUTION_COMPLETED, c.EXECUTION_REJECTED},
    c.EXECUTION_COMPLETED: {c.EXECUTION_APPROVED, c.EXECUTION_REJECTED},
    c.EXECUTION_APPROVED: set(),
    c.EXECUTION_REJECTED: set(),
}

DISPUTE_TRANSITIONS = {
    c.DISPUTE_OPEN: {c.DISPUTE_UNDER_REVIEW, c.DISPUTE_RESOLVED, c.DISPUTE_CLOSED},
    c.DISPUTE_UNDER_REVIEW: {c.DISPUTE_RESOLVED, c.DISPUTE_CLOSED},
    c.DISPUTE_RESOLVED: {c.DISPUTE_CLOSED},
    c.DISPUTE_CLOSED: set(),
}

TRANSACTION_TRANSITIONS = {
    c.TX_PENDING: {c.TX_COMPLETED, c.TX_FAILED},
    c.TX_COMPLETED: set(),
    c.TX_FAILED: set(),
}

TRANSITIONS = {
    "order": ORDER_TRANSITIONS,
    "task": TASK_TRANSITIONS,
    "execution": EXECUTION_TRANSITIONS,
    "dispute": DISPUTE_TRANSITIONS,
    "transaction": TRANSACTION_TRANSITIONS,
}


def can_transition(entity: str, current: str, target: str) -> bool:
    return target in TRANSITIONS[entity].get(current, set())


def ensure_transition(entity: str, current: str, target: str) -> None:
    """Бросает 400, если переход current -> target для сущности запрещен."""
    if not can_transition(entity, current, target):
        logger.warning(f"Rejected illegal {entity} transition: {current} -> {target}")
        raise ApiError.bad_request(f"Cannot change {entity} status from '{current}' to '{target}'")

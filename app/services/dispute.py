# app/services/dispute.py

import logging
import math

from sqlalchemy.orm import Session

from app.core import constants as c
from app.core.exceptions import ApiError
from app.core.lifecycle import ensure_transition
from app.crud import dispute as crud_dispute
from app.crud import order as crud_order
from app.models.dispute import Dispute
from app.models.user import User
from app.schemas.dispute import DisputeCreate, DisputeUpdate, PaginatedDisputes
from app.services.notification_api import notify
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)


def create_dispute(db: Session, user: User, data: DisputeCreate) -> Dispute:
    order = crud_order.get_user_order(db, user.id, data.order_id)
    if order is None:
        raise ApiError.not_found("Order not found")

    dispute = crud_dispute.create_dispute(
        db, user_id=user.id, order_id=order.id, type=data.type,
        subject=data.subject, description=data.description,
    )
    notify(db, user.id, "dispute_created", "Dispute opened",
           f"Your dispute '{dispute.subject}' was received.", dispute.id)
    db.commit()
    logger.info(f"Dispute {dispute.id} opened by user {user.id} for order {order.id}")
    return dispute


def get_paginated(db: Session, page: int, size: int, **filters) -> PaginatedDisputes:
    skip = (page - 1) * size
    items = crud_dispute.get_disputes(db, skip=skip, limit=size, **filters)
    total_items = crud_dispute.count_disputes(db, **filters)
    total_pages = math.ceil(total_items / size) if total_items > 0 else 1
    return PaginatedDisputes(
        total_items=total_items, total_pages=total_pages,
        current_page=page, size=size, items=items,
    )


def get_user_dispute(db: Session, user: User, dispute_id: str) -> Dispute:
    dispute = crud_dispute.get_user_dispute(db, user.id, dispute_id)
    if dispute is None:
        raise ApiError.not_found("Dispute not found")
    return dispute


def update_dispute(db: Session, user: User, dispute_id: str, data: DisputeUpdate) -> Dispute:
    dispute = get_user_dispute(db, user, dispute_id)
    if dispute.status == c.DISPUTE_CLOSED:
        raise ApiError.bad_request("Cannot update a closed dispute")
    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(dispute, field, value)
    db.commit()
    db.refresh(dispute)
    return dispute


# --- Действия администратора ---

def get_dispute(db: Session, dispute_id: str) -> Dispute:
    dispute = crud_dispute.get_dispute(db, dispute_id)
    if dispute is None:
        raise ApiError.not_found("Dispute not found")
    return dispute


def review_dispute(db: Session, dispute_id: str, admin: User) -> Dispute:
    dispute = get_dispute(db, dispute_id)
    ensure_transition("dispute", dispute.status, c.DISPUTE_UNDER_REVIEW)
    dispute.status = c.DISPUTE_UNDER_REVIEW
    notify(db, dispute.user_id, "dispute_update", "Dispute under review",
           f"Your dispute '{dispute.subject}' is being reviewed.", dispute.id)
    db.commit()
    db.refresh(dispute)
    logger.info(f"Dispute {dispute.id} taken into review by admin {admin.id}")
    return dispute


def resolve_dispute(db: Session, dispute_id: str, admin: User, resolution: str) -> Dispute:
    dispute = get_dispute(db, dispute_id)
    ensure_transition("dispute", dispute.status, c.DISPUTE_RESOLVED)
    dispute.status = c.DISPUTE_RESOLVED
    dispute.resolution = resolution
    dispute.resolved_by = admin.id
    dispute.resolved_at = utcnow()
    notify(db, dispute.user_id, "dispute_resolved", "Dispute resolved", resolution, dispute.id)
    db.commit()
    db.refresh(dispute)
    logger.info(f"Dispute {dispute.id} resolved by admin {admin.id}")
    return dispute


def close_dispute(db: Session, dispute_id: str, admin: User, resolution: str | None = None) -> Dispute:
    dispute = get_dispute(db, dispute_id)
    ensure_transition("dispute", dispute.status, c.DISPUTE_CLOSED)
    dispute.status = c.DISPUTE_CLOSED
    if resolution:
        dispute.resolution = resolution
    if dispute.resolved_at is None:
        dispute.resolved_by = admin.id
        dispute.resolved_at = utcnow()
    db.commit()
    db.refresh(dispute)
    logger.info(f"Dispute {dispute.id} closed by admin {admin.id}")
    return dispute

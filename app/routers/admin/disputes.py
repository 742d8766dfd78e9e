# app/routers/admin/disputes.py

from typing import Literal

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from app.dependencies import get_current_admin, get_db
from app.models.user import User
from app.schemas.admin import DisputeClose, DisputeReview
from app.schemas.dispute import Dispute, DisputeResolve, PaginatedDisputes
from app.services import activity as activity_service
from app.services import dispute as dispute_service

router = APIRouter()


@router.get("", response_model=PaginatedDisputes)
def get_disputes_list(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    status_filter: Literal["open", "under_review", "resolved", "closed"] | None = Query(None, alias="status"),
    dispute_type: Literal["order_issue", "payment_issue", "technical_issue", "other"] | None = Query(None, alias="type"),
    user_id: str | None = Query(None),
    db: Session = Depends(get_db),
):
    """[АДМИН] Список споров всех пользователей."""
    filters = {"status": status_filter, "type": dispute_type, "user_id": user_id}
    active_filters = {k: v for k, v in filters.items() if v is not None}
    return dispute_service.get_paginated(db, page, size, **active_filters)


@router.get("/{dispute_id}", response_model=Dispute)
def get_dispute(dispute_id: str, db: Session = Depends(get_db)):
    return dispute_service.get_dispute(db, dispute_id)


@router.put("/{dispute_id}/review", response_model=Dispute)
def review_dispute(
    dispute_id: str,
    data: DisputeReview,
    request: Request,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """[АДМИН] Берет спор в работу."""
    dispute = dispute_service.review_dispute(db, dispute_id, admin)
    activity_service.log_admin_action(db, request, admin, "dispute", "review", dispute_id,
                                      {"admin_notes": data.admin_notes} if data.admin_notes else None)
    return dispute


@router.put("/{dispute_id}/resolve", response_model=Dispute)
def resolve_dispute(
    dispute_id: str,
    data: DisputeResolve,
    request: Request,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    """[АДМИН] Фиксирует решение по спору и уведомляет пользователя."""
    dispute = dispute_service.resolve_dispute(db, dispute_id, admin, data.resolution)
    activity_service.log_admin_action(db, request, admin, "dispute", "resolve", dispute_id)
    return dispute


@router.put("/{dispute_id}/close", response_model=Dispute)
def close_dispute(
    dispute_id: str,
    data: DisputeClose,
    request: Request,
    admin: User = Depends(get_current_admin),
    db: Session = Depends(get_db),
):
    dispute = dispute_service.close_dispute(db, dispute_id, admin, data.resolution)
    activity_service.log_admin_action(db, request, admin, "dispute", "close", dispute_id)
    return dispute

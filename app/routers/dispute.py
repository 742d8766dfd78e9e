# app/routers/dispute.py

from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.dependencies import get_current_user, get_db
from app.models.user import User
from app.schemas.dispute import Dispute, DisputeCreate, DisputeUpdate, PaginatedDisputes
from app.services import dispute as dispute_service

router = APIRouter(prefix="/disputes")


@router.post("", response_model=Dispute, status_code=status.HTTP_201_CREATED)
def create_dispute(data: DisputeCreate, current_user: User = Depends(get_current_user),
                   db: Session = Depends(get_db)):
    return dispute_service.create_dispute(db, current_user, data)


@router.get("", response_model=PaginatedDisputes)
def list_disputes(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    status_filter: Literal["open", "under_review", "resolved", "closed"] | None = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return dispute_service.get_paginated(db, page, size, user_id=current_user.id, status=status_filter)


@router.get("/{dispute_id}", response_model=Dispute)
def get_dispute(dispute_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return dispute_service.get_user_dispute(db, current_user, dispute_id)


@router.put("/{dispute_id}", response_model=Dispute)
def update_dispute(
    dispute_id: str,
    data: DisputeUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Правка темы или описания. Закрытый спор изменить нельзя."""
    return dispute_service.update_dispute(db, current_user, dispute_id, data)

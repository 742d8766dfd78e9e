# app/crud/dispute.py
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.dispute import Dispute


def create_dispute(db: Session, user_id: str, order_id: str, type: str, subject: str,
                   description: str) -> Dispute:
    db_dispute = Dispute(
        user_id=user_id,
        order_id=order_id,
        type=type,
        subject=subject,
        description=description,
        status="open",
    )
    db.add(db_dispute)
    db.commit()
    db.refresh(db_dispute)
    return db_dispute

def get_dispute(db: Session, dispute_id: str) -> Dispute | None:
    return db.query(Dispute).filter(Dispute.id == dispute_id).first()

def get_user_dispute(db: Session, user_id: str, dispute_id: str) -> Dispute | None:
    return db.query(Dispute).filter(Dispute.id == dispute_id, Dispute.user_id == user_id).first()


def _apply_filters(query, user_id: str | None = None, status: str | None = None, type: str | None = None):
    if user_id:
        query = query.filter(Dispute.user_id == user_id)
    if status:
        query = query.filter(Dispute.status == status)
    if type:
        query = query.filter(Dispute.type == type)
    return query

def get_disputes(db: Session, skip: int = 0, limit: int = 20, **filters) -> list[Dispute]:
    query = _apply_filters(db.query(Dispute), **filters)
    return query.order_by(Dispute.created_at.desc()).offset(skip).limit(limit).all()

def count_disputes(db: Session, **filters) -> int:
    return _apply_filters(db.query(func.count(Dispute.id)), **filters).scalar()

# app/crud/social_account.py
from sqlalchemy.orm import Session

from app.models.social_account import SocialAccount


def create_account(db: Session, user_id: str, platform: str, username: str,
                   credentials: dict | None, settings: dict | None) -> SocialAccount:
    db_account = SocialAccount(
        user_id=user_id,
        platform=platform,
        username=username,
        credentials=credentials,
        settings=settings,
        status="active",
    )
    db.add(db_account)
    db.commit()
    db.refresh(db_account)
    return db_account

def get_by_platform_username(db: Session, platform: str, username: str) -> SocialAccount | None:
    return db.query(SocialAccount).filter(
        SocialAccount.platform == platform,
        SocialAccount.username == username,
    ).first()

def get_user_account(db: Session, user_id: str, account_id: str, platform: str | None = None) -> SocialAccount | None:
    query = db.query(SocialAccount).filter(SocialAccount.id == account_id, SocialAccount.user_id == user_id)
    if platform:
        query = query.filter(SocialAccount.platform == platform)
    return query.first()

def get_user_accounts(db: Session, user_id: str, platform: str | None = None) -> list[SocialAccount]:
    query = db.query(SocialAccount).filter(SocialAccount.user_id == user_id)
    if platform:
        query = query.filter(SocialAccount.platform == platform)
    return query.order_by(SocialAccount.created_at.desc()).all()

def delete_account(db: Session, account: SocialAccount) -> None:
    db.delete(account)
    db.commit()

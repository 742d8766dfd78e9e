# app/services/social_account.py

import logging
from datetime import timedelta

from sqlalchemy.orm import Session

from app.core.exceptions import ApiError
from app.core.security import hash_password
from app.crud import social_account as crud_social_account
from app.crud import task as crud_task
from app.models.social_account import SocialAccount
from app.models.task import TaskExecution
from app.models.user import User
from app.schemas.social_account import (
    InstagramAccountCreate, SocialAccountCreate, SocialAccountSettingsUpdate, SocialAccountStats,
)
from app.services.user import deep_merge
from app.utils.dates import utcnow
from app.utils.money import to_money

logger = logging.getLogger(__name__)

INSTAGRAM = "instagram"


def _protect_credentials(credentials: dict) -> dict:
    """Пароль сохраняется только в виде bcrypt-хеша."""
    protected = dict(credentials)
    password = protected.pop("password", None)
    if password:
        protected["password_hash"] = hash_password(str(password))
    return protected


def add_account(db: Session, user: User, data: SocialAccountCreate) -> SocialAccount:
    if crud_social_account.get_by_platform_username(db, data.platform, data.username):
        raise ApiError.bad_request("Account already exists")
    account = crud_social_account.create_account(
        db, user_id=user.id, platform=data.platform, username=data.username,
        credentials=_protect_credentials(data.credentials), settings=data.settings,
    )
    logger.info(f"Social account {account.id} ({account.platform}:{account.username}) added by user {user.id}")
    return account


def add_instagram_account(db: Session, user: User, data: InstagramAccountCreate) -> SocialAccount:
    return add_account(db, user, SocialAccountCreate(
        platform=INSTAGRAM, username=data.username, credentials={"password": data.password},
    ))


def list_accounts(db: Session, user: User, platform: str | None = None) -> list[SocialAccount]:
    return crud_social_account.get_user_accounts(db, user.id, platform=platform)


def get_account(db: Session, user: User, account_id: str, platform: str | None = None) -> SocialAccount:
    account = crud_social_account.get_user_account(db, user.id, account_id, platform=platform)
    if account is None:
        raise ApiError.not_found("Account not found")
    return account


def update_settings(db: Session, user: User, account_id: str, data: SocialAccountSettingsUpdate,
                    platform: str | None = None) -> SocialAccount:
    account = get_account(db, user, account_id, platform)
    account.settings = deep_merge(account.settings or {}, data.settings)
    if data.status:
        account.status = data.status
    db.commit()
    db.refresh(account)
    return account


def delete_account(db: Session, user: User, account_id: str, platform: str | None = None) -> None:
    account = get_account(db, user, account_id, platform)
    crud_social_account.delete_account(db, account)
    logger.info(f"Social account {account_id} deleted by user {user.id}")


def get_stats(db: Session, user: User, account_id: str, platform: str | None = None) -> SocialAccountStats:
    account = get_account(db, user, account_id, platform)
    recent = crud_task.execution_totals(
        db, TaskExecution.social_account_id, account.id, since=utcnow() - timedelta(days=30)
    )
    return SocialAccountStats(
        account_id=account.id,
        total_followed=account.total_followed,
        total_likes=account.total_likes,
        total_views=account.total_views,
        total_subscriptions=account.total_subscriptions,
        total_earnings=to_money(account.total_earnings),
        tasks_last_30_days=recent["approved_tasks"],
        earnings_last_30_days=to_money(recent["earnings"]),
        last_activity=recent["last_activity"],
    )

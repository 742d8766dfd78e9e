# app/routers/social_account.py

from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.dependencies import get_current_user, get_db
from app.models.user import User
from app.schemas.order import Platform
from app.schemas.social_account import (
    SocialAccount, SocialAccountCreate, SocialAccountSettingsUpdate, SocialAccountStats,
)
from app.services import social_account as social_account_service

router = APIRouter(prefix="/social-accounts")


@router.post("", response_model=SocialAccount, status_code=status.HTTP_201_CREATED)
def add_account(data: SocialAccountCreate, current_user: User = Depends(get_current_user),
                db: Session = Depends(get_db)):
    """Подключает аккаунт соцсети. Пароль из credentials хранится только в виде хеша."""
    return social_account_service.add_account(db, current_user, data)


@router.get("", response_model=List[SocialAccount])
def list_accounts(platform: Platform | None = Query(None), current_user: User = Depends(get_current_user),
                  db: Session = Depends(get_db)):
    return social_account_service.list_accounts(db, current_user, platform)


@router.get("/{account_id}", response_model=SocialAccount)
def get_account(account_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return social_account_service.get_account(db, current_user, account_id)


@router.put("/{account_id}/settings", response_model=SocialAccount)
def update_account_settings(
    account_id: str,
    data: SocialAccountSettingsUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return social_account_service.update_settings(db, current_user, account_id, data)


@router.get("/{account_id}/stats", response_model=SocialAccountStats)
def get_account_stats(account_id: str, current_user: User = Depends(get_current_user),
                      db: Session = Depends(get_db)):
    return social_account_service.get_stats(db, current_user, account_id)


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(account_id: str, current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    social_account_service.delete_account(db, current_user, account_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

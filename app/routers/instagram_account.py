# app/routers/instagram_account.py
# Те же соцаккаунты, но только с platform='instagram'.

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.dependencies import get_current_user, get_db
from app.models.user import User
from app.schemas.social_account import (
    InstagramAccountCreate, SocialAccount, SocialAccountSettingsUpdate, SocialAccountStats,
)
from app.services import social_account as social_account_service
from app.services.social_account import INSTAGRAM

router = APIRouter(prefix="/instagram-accounts")


@router.post("", response_model=SocialAccount, status_code=status.HTTP_201_CREATED)
def add_instagram_account(data: InstagramAccountCreate, current_user: User = Depends(get_current_user),
                          db: Session = Depends(get_db)):
    return social_account_service.add_instagram_account(db, current_user, data)


@router.get("", response_model=List[SocialAccount])
def list_instagram_accounts(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return social_account_service.list_accounts(db, current_user, INSTAGRAM)


@router.get("/{account_id}", response_model=SocialAccount)
def get_instagram_account(account_id: str, current_user: User = Depends(get_current_user),
                          db: Session = Depends(get_db)):
    return social_account_service.get_account(db, current_user, account_id, INSTAGRAM)


@router.put("/{account_id}/settings", response_model=SocialAccount)
def update_instagram_account_settings(
    account_id: str,
    data: SocialAccountSettingsUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return social_account_service.update_settings(db, current_user, account_id, data, INSTAGRAM)


@router.get("/{account_id}/stats", response_model=SocialAccountStats)
def get_instagram_account_stats(account_id: str, current_user: User = Depends(get_current_user),
                                db: Session = Depends(get_db)):
    return social_account_service.get_stats(db, current_user, account_id, INSTAGRAM)


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_instagram_account(account_id: str, current_user: User = Depends(get_current_user),
                             db: Session = Depends(get_db)):
    social_account_service.delete_account(db, current_user, account_id, INSTAGRAM)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

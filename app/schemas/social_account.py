# app/schemas/social_account.py
from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

INSTAGRAM_USERNAME_PATTERN = r"^[a-zA-Z0-9._]{1,30}$"


class SocialAccountCreate(BaseModel):
    platform: Literal["instagram", "youtube"]
    username: str = Field(..., min_length=1, max_length=100)
    credentials: Dict[str, Any] = Field(default_factory=dict)
    settings: Dict[str, Any] = Field(default_factory=dict)


class InstagramAccountCreate(BaseModel):
    username: str = Field(..., pattern=INSTAGRAM_USERNAME_PATTERN)
    password: str = Field(..., min_length=6, max_length=128)


class SocialAccountSettingsUpdate(BaseModel):
    settings: Dict[str, Any]
    status: Optional[Literal["active", "inactive", "limited"]] = None


class SocialAccount(BaseModel):
    id: str
    platform: str
    username: str
    status: str
    last_checked: datetime | None = None
    settings: Dict[str, Any] | None = None
    total_followed: int
    total_likes: int
    total_views: int
    total_subscriptions: int
    total_earnings: float
    created_at: datetime

    class Config:
        from_attributes = True


class SocialAccountStats(BaseModel):
    account_id: str
    total_followed: int
    total_likes: int
    total_views: int
    total_subscriptions: int
    total_earnings: float
    tasks_last_30_days: int
    earnings_last_30_days: float
    last_activity: datetime | None = None

# app/schemas/user.py
import re
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

PHONE_PATTERN = r"^\+?[0-9]{7,15}$"


class UserRegister(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    username: str = Field(..., min_length=3, max_length=50)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)

    @field_validator("first_name", "last_name", "username", mode="before")
    def strip_strings(cls, v):
        return v.strip() if isinstance(v, str) else v


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


# Схема пользователя, которую мы отдаем клиенту
class User(BaseModel):
    id: str
    email: str
    username: str
    first_name: str
    last_name: str
    phone: str | None = None
    role: str
    user_mode: str
    balance: float
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: User


class ProfileUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, pattern=PHONE_PATTERN)


class PasswordChange(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)

    @field_validator("new_password")
    def password_strength(cls, v):
        if not (re.search(r"[a-z]", v) and re.search(r"[A-Z]", v) and re.search(r"\d", v)):
            raise ValueError("Password must contain at least one uppercase letter, one lowercase letter, and one number")
        return v


class ModeUpdate(BaseModel):
    user_mode: Literal["task_doer", "task_giver"]


class NotificationPreferences(BaseModel):
    email: bool = True
    browser: bool = True


class PrivacyPreferences(BaseModel):
    hide_profile: bool = False
    hide_stats: bool = False


class UserSettings(BaseModel):
    notifications: NotificationPreferences = NotificationPreferences()
    privacy: PrivacyPreferences = PrivacyPreferences()
    language: Literal["en", "tr"] = "en"


class NotificationPreferencesUpdate(BaseModel):
    email: Optional[bool] = None
    browser: Optional[bool] = None


class PrivacyPreferencesUpdate(BaseModel):
    hide_profile: Optional[bool] = None
    hide_stats: Optional[bool] = None


class UserSettingsUpdate(BaseModel):
    notifications: Optional[NotificationPreferencesUpdate] = None
    privacy: Optional[PrivacyPreferencesUpdate] = None
    language: Optional[Literal["en", "tr"]] = None


class SessionInfo(BaseModel):
    id: str
    ip_address: str | None = None
    user_agent: str | None = None
    last_activity: datetime
    expires_at: datetime
    created_at: datetime
    is_current: bool = False

    class Config:
        from_attributes = True


class SessionList(BaseModel):
    items: List[SessionInfo]

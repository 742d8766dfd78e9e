# app/routers/user.py

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.dependencies import get_current_session, get_current_user, get_db
from app.models.user import User
from app.schemas.user import (
    ModeUpdate, PasswordChange, ProfileUpdate, SessionList, User as UserSchema, UserSettings,
    UserSettingsUpdate,
)
from app.services import session as session_service
from app.services import user as user_service

router = APIRouter(prefix="/user")


@router.get("/profile", response_model=UserSchema)
def get_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/profile", response_model=UserSchema)
def update_profile(
    data: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Обновляет имя, фамилию и телефон."""
    return user_service.update_profile(db, current_user, data)


@router.put("/password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    data: PasswordChange,
    current_user: User = Depends(get_current_user),
    current_session=Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """Смена пароля. Остальные сессии пользователя завершаются."""
    user_service.change_password(db, current_user, data, current_session)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/mode", response_model=UserSchema)
def change_mode(
    data: ModeUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Переключение между режимами исполнителя и заказчика."""
    return user_service.change_mode(db, current_user, data)


@router.get("/settings", response_model=UserSettings)
def get_settings(current_user: User = Depends(get_current_user)):
    return user_service.get_settings(current_user)


@router.put("/settings", response_model=UserSettings)
def update_settings(
    data: UserSettingsUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return user_service.update_settings(db, current_user, data)


@router.get("/sessions", response_model=SessionList)
def list_sessions(
    current_user: User = Depends(get_current_user),
    current_session=Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return SessionList(items=user_service.list_sessions(db, current_user, current_session))


@router.post("/sessions/logout-all", status_code=status.HTTP_204_NO_CONTENT)
def logout_all(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Завершает все сессии пользователя, включая текущую."""
    session_service.invalidate_all_user_sessions(db, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

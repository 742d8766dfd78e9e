# app/routers/auth.py

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from app.dependencies import get_client_info, get_current_session, get_current_user, get_db
from app.models.user import User
from app.schemas.user import AuthResponse, User as UserSchema, UserLogin, UserRegister
from app.services import activity as activity_service
from app.services import auth as auth_service

router = APIRouter(prefix="/auth")


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(data: UserRegister, request: Request, db: Session = Depends(get_db)):
    """Регистрация нового пользователя. Сразу возвращает токен первой сессии."""
    ip_address, user_agent = get_client_info(request)
    result = await auth_service.register(db, data, ip_address, user_agent)
    activity_service.log_action(db, request, result.user, "auth", "register", result.user.id)
    return result


@router.post("/login", response_model=AuthResponse)
def login(data: UserLogin, request: Request, db: Session = Depends(get_db)):
    """Вход по email и паролю."""
    ip_address, user_agent = get_client_info(request)
    result = auth_service.login(db, data.email, data.password, ip_address, user_agent)
    activity_service.log_action(db, request, result.user, "auth", "login", result.user.id)
    return result


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(db_session=Depends(get_current_session), db: Session = Depends(get_db)):
    """Завершает текущую сессию."""
    auth_service.logout(db, db_session.token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/validate", response_model=UserSchema)
def validate(current_user: User = Depends(get_current_user)):
    """Проверка токена: возвращает текущего пользователя."""
    return current_user

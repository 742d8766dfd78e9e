# app/routers/admin/auth.py

from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from app.dependencies import get_client_info, get_current_admin, get_db
from app.models.user import User
from app.schemas.admin import AdminAuthResponse, AdminLogin
from app.schemas.user import User as UserSchema
from app.services import activity as activity_service
from app.services import auth as auth_service
from app.services import session as session_service

router = APIRouter()


@router.post("/login", response_model=AdminAuthResponse)
def admin_login(data: AdminLogin, request: Request, db: Session = Depends(get_db)):
    """
    [АДМИН] Вход в админ-панель. Создает отдельную админскую сессию
    с укороченным сроком жизни.
    """
    ip_address, user_agent = get_client_info(request)
    result = auth_service.admin_login(db, data.email, data.password, ip_address, user_agent)
    activity_service.log_admin_action(db, request, result.user, "auth", "login", result.user.id)
    return result


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def admin_logout(request: Request, admin: User = Depends(get_current_admin), db: Session = Depends(get_db)):
    """[АДМИН] Завершает текущую админскую сессию."""
    session_service.invalidate_admin_session(db, request.state.session.token)
    activity_service.log_admin_action(db, request, admin, "auth", "logout", admin.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=UserSchema)
def admin_me(admin: User = Depends(get_current_admin)):
    """[АДМИН] Текущий администратор."""
    return admin

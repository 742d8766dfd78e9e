# app/routers/admin/dashboard.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.dependencies import get_db
from app.schemas.admin import DashboardOverview
from app.services import admin as admin_service

router = APIRouter()


@router.get("/overview", response_model=DashboardOverview)
async def get_dashboard_overview(db: Session = Depends(get_db)):
    """
    [АДМИН] Сводка для главной страницы: пользователи, заказы, выручка, задания.
    """
    return await admin_service.get_dashboard_overview(db)

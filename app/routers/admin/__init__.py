# app/routers/admin/__init__.py

from fastapi import APIRouter, Depends

from app.dependencies import get_current_admin

# 1. Импортируем все модули с роутерами из текущего пакета
from . import (
    activity,
    auth,
    balance,
    dashboard,
    disputes,
    jobs,
    orders,
    settings,
    tasks,
    users,
)

# 2. Главный роутер админки. Вход (/auth/login) доступен без токена,
#    поэтому auth подключается отдельно от защищенной части.
router = APIRouter()
router.include_router(auth.router, prefix="/auth")

# 3. Защищенная часть: зависимость get_current_admin применяется ко ВСЕМ
#    эндпоинтам ниже, так что проверять сессию в каждом из них не нужно.
protected_router = APIRouter(dependencies=[Depends(get_current_admin)])

# /admin/dashboard/overview
protected_router.include_router(dashboard.router, prefix="/dashboard")

# /admin/users, /admin/users/{id}, /admin/users/{id}/balance
protected_router.include_router(users.router, prefix="/users")

# /admin/orders, /admin/orders/{id}/approve и т.д.
protected_router.include_router(orders.router, prefix="/orders")

# /admin/tasks, /admin/tasks/submissions
protected_router.include_router(tasks.router, prefix="/tasks")

# /admin/balance/requests
protected_router.include_router(balance.router, prefix="/balance")

protected_router.include_router(disputes.router, prefix="/disputes")
protected_router.include_router(settings.router, prefix="/settings")
protected_router.include_router(activity.router, prefix="/activity")

# /admin/jobs, /admin/jobs/run
protected_router.include_router(jobs.router, prefix="/jobs")

router.include_router(protected_router)

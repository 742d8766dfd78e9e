# app/tasks_registry.py

from app.services import notification_cleanup, session, statistics

# --- Обертки: каждая задача сама открывает сессию БД ---

def run_refresh_order_statistics():
    statistics.refresh_stale_statistics_task()

def run_cleanup_expired_sessions():
    session.cleanup_expired_sessions_task()

def run_cleanup_old_notifications():
    notification_cleanup.cleanup_old_notifications_task()


# --- Словарь-реестр всех задач, доступных для ручного запуска ---
# Ключ - уникальное имя задачи, которое будет использоваться в API.
# 'function' - сама функция для вызова.
# 'description' - описание для отображения в админке.

TASKS = {
    "refresh_order_statistics": {
        "function": run_refresh_order_statistics,
        "description": "Пересчитывает устаревшие сводки по заказам пользователей.",
    },
    "cleanup_expired_sessions": {
        "function": run_cleanup_expired_sessions,
        "description": "Удаляет истекшие пользовательские и админские сессии.",
    },
    "cleanup_old_notifications": {
        "function": run_cleanup_old_notifications,
        "description": "Удаляет старые уведомления из базы данных.",
    },
}

# Отдельная функция для получения списка задач для API
def get_tasks_list():
    return [
        {"job_name": name, "description": data["description"]}
        for name, data in TASKS.items()
    ]

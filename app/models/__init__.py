# app/models/__init__.py
# Импорт всех моделей, чтобы они зарегистрировались в Base.metadata
from app.models.user import User
from app.models.session import Session, AdminSession
from app.models.order import Order
from app.models.task import Task, TaskExecution
from app.models.transaction import Transaction
from app.models.device import Device
from app.models.social_account import SocialAccount
from app.models.dispute import Dispute
from app.models.order_statistic import OrderStatistic
from app.models.notification import Notification
from app.models.activity_log import ActivityLog
from app.models.platform_setting import PlatformSetting

# app/crud/user.py
from datetime import datetime
from sqlalchemy.orm import Session
from app.models.user import User
from sqlalchemy import func, or_


def get_user_by_id(db: Session, user_id: str) -> User | None:
    """Получает пользователя по его первичному ключу."""
    return db.query(User).filter(User.id == user_id).first()

def get_user_for_update(db: Session, user_id: str) -> User | None:
    """Получает пользователя с блокировкой строки до конца транзакции (для операций с балансом)."""
    return db.query(User).filter(User.id == user_id).with_for_update().populate_existing().first()

def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(func.lower(User.email) == email.lower()).first()

def get_user_by_email_or_username(db: Session, email: str, username: str) -> User | None:
    return db.query(User).filter(
        or_(func.lower(User.email) == email.lower(), func.lower(User.username) == username.lower())
    ).first()

def create_user(
    db: Session,
    email: str,
    username: str,
    password_hash: str,
    first_name: str,
    last_name: str,
    phone: str | None = None,
    role: str = "user",
    user_mode: str = "task_doer",
) -> User:
    """Создает нового пользователя в БД."""
    db_user = User(
        email=email.lower(),
        username=username,
        password_hash=password_hash,
        first_name=first_name,
        last_name=last_name,
        phone=phone,
        role=role,
        user_mode=user_mode,
        balance=0,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def _apply_filters(query, search: str | None = None, role: str | None = None,
                   user_mode: str | None = None, is_active: bool | None = None):
    if role:
        query = query.filter(User.role == role)
    if user_mode:
        query = query.filter(User.user_mode == user_mode)
    if is_active is not None:
        query = query.filter(User.is_active == is_active)
    if search:
        search_query = f"%{search}%"
        query = query.filter(or_(
            User.email.ilike(search_query),
            User.username.ilike(search_query),
            (User.first_name + ' ' + User.last_name).ilike(search_query),
        ))
    return query


SORTABLE_USER_FIELDS = {
    "created_at": User.created_at,
    "email": User.email,
    "username": User.username,
    "balance": User.balance,
    "last_login": User.last_login,
}

def get_users(
    db: Session,
    skip: int = 0,
    limit: int = 20,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    **filters,
) -> list[User]:
    """
    Получает пагинированный список пользователей с фильтрами и поиском.
    """
    query = _apply_filters(db.query(User), **filters)
    column = SORTABLE_USER_FIELDS.get(sort_by, User.created_at)
    query = query.order_by(column.asc() if sort_order == "asc" else column.desc())
    return query.offset(skip).limit(limit).all()


def count_users_with_filters(db: Session, **filters) -> int:
    """Подсчитывает общее количество пользователей с учетом фильтров и поиска."""
    return _apply_filters(db.query(func.count(User.id)), **filters).scalar()


def count_all_users(db: Session) -> int:
    return db.query(User).count()

def count_users_by(db: Session, column) -> dict:
    """Группировка пользователей по колонке: {значение: количество}."""
    rows = db.query(column, func.count(User.id)).group_by(column).all()
    return {value: count for value, count in rows}

def count_new_users_since(db: Session, since: datetime) -> int:
    return db.query(User).filter(User.created_at >= since).count()

def count_active_users_since(db: Session, since: datetime) -> int:
    return db.query(User).filter(User.last_login >= since).count()

def total_balance(db: Session) -> float:
    return db.query(func.coalesce(func.sum(User.balance), 0)).scalar()

# app/crud/platform_setting.py
from sqlalchemy.orm import Session

from app.models.platform_setting import PlatformSetting


def get_all(db: Session) -> dict:
    return {row.key: row.value for row in db.query(PlatformSetting).all()}

def set_values(db: Session, values: dict, updated_by: str | None = None) -> None:
    for key, value in values.items():
        row = db.query(PlatformSetting).filter(PlatformSetting.key == key).first()
        if row is None:
            row = PlatformSetting(key=key)
            db.add(row)
        row.value = value
        row.updated_by = updated_by
    db.commit()

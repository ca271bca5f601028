import datetime as dt
from typing import Any, Mapping

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.errors import UserValidationError
from app.core.security import hash_password
from app.db.models.user import User
from app.services.validation import validate_user

_UPDATABLE = ("email", "display_name", "last_login_at")

def normalize_email(email: str) -> str:
    return email.strip().lower()

def find_by_id(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).one_or_none()

def find_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).one_or_none()

def find_all(db: Session) -> list[User]:
    return db.query(User).order_by(User.id).all()

def count(db: Session) -> int:
    return db.query(func.count(User.id)).scalar() or 0

def create(db: Session, data: Mapping[str, Any], password: str | None = None) -> User:
    errors = validate_user(data)
    if errors:
        raise UserValidationError(errors)
    u = User(
        email=normalize_email(data["email"]),
        display_name=str(data.get("display_name", data.get("displayName"))).strip(),
        last_login_at=data.get("last_login_at", data.get("lastLoginAt")),
        password_hash=hash_password(password) if password else None,
    )
    db.add(u)
    db.commit()
    db.refresh(u)
    return u

def update(db: Session, user_id: int, data: Mapping[str, Any]) -> User | None:
    u = find_by_id(db, user_id)
    if not u:
        return None
    candidate = {
        "email": data.get("email", u.email),
        "display_name": data.get("display_name", u.display_name),
        "last_login_at": data.get("last_login_at", u.last_login_at),
    }
    errors = validate_user(candidate)
    if errors:
        raise UserValidationError(errors)
    for key in _UPDATABLE:
        if key in data:
            value = data[key]
            if key == "display_name":
                value = value.strip()
            elif key == "email":
                value = normalize_email(value)
            setattr(u, key, value)
    db.commit()
    db.refresh(u)
    return u

def delete(db: Session, user_id: int) -> bool:
    deleted = db.query(User).filter(User.id == user_id).delete()
    db.commit()
    return deleted > 0

def update_last_login(db: Session, user_id: int) -> None:
    db.query(User).filter(User.id == user_id).update(
        {User.last_login_at: dt.datetime.now(dt.timezone.utc)}
    )
    db.commit()

import datetime as dt
from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.models._mixins import TimestampMixin

class User(Base, TimestampMixin):
    __tablename__ = "user"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True)
    display_name: Mapped[str] = mapped_column(String(256))
    last_login_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # local accounts only; users without a password cannot log in with /auth/login
    password_hash: Mapped[str | None] = mapped_column(String(256), nullable=True)

    import_jobs = relationship("ImportJob", back_populates="user", cascade="all, delete-orphan", passive_deletes=True)

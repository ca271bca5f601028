import datetime as dt
from enum import Enum
from typing import Any

from sqlalchemy import String, ForeignKey, Date, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class ImportItemStatus(str, Enum):
    preview = "preview"
    created = "created"
    skipped = "skipped"
    failed = "failed"


ITEM_STATUSES = frozenset(s.value for s in ImportItemStatus)


class ImportItem(Base):
    __tablename__ = "import_item"

    id: Mapped[int] = mapped_column(primary_key=True)
    import_job_id: Mapped[int] = mapped_column(ForeignKey("import_job.id", ondelete="CASCADE"), index=True)

    raw_row: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)

    subject_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    section_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    start_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    end_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    days_of_week: Mapped[str | None] = mapped_column(String(32), nullable=True)
    start_time: Mapped[str | None] = mapped_column(String(5), nullable=True)  # HH:MM
    end_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    room: Mapped[str | None] = mapped_column(String(128), nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)

    status: Mapped[str] = mapped_column(String(16), default=ImportItemStatus.preview.value, index=True)

    import_job = relationship("ImportJob", back_populates="items")

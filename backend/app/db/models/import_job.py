from enum import Enum
from typing import Any

from sqlalchemy import String, ForeignKey, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base
from app.db.models._mixins import TimestampMixin


class SourceType(str, Enum):
    csv = "csv"
    xlsx = "xlsx"


class ImportJobState(str, Enum):
    pending = "pending"
    preview = "preview"
    applied = "applied"
    failed = "failed"


class ImportJob(Base, TimestampMixin):
    __tablename__ = "import_job"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("user.id", ondelete="CASCADE"), index=True)

    source_type: Mapped[str] = mapped_column(String(8))
    file_name: Mapped[str | None] = mapped_column(String(512), nullable=True)
    column_map: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    headers: Mapped[list[str] | None] = mapped_column(JSON, nullable=True)
    parse_errors: Mapped[list[dict[str, Any]] | None] = mapped_column(JSON, nullable=True)
    state: Mapped[str] = mapped_column(String(16), default=ImportJobState.pending.value)
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    user = relationship("User", back_populates="import_jobs")
    items = relationship(
        "ImportItem",
        back_populates="import_job",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ImportItem.id",
    )

import datetime as dt
from typing import Any
from pydantic import BaseModel, ConfigDict

class ImportJobOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    source_type: str
    file_name: str | None
    column_map: dict[str, str] | None
    headers: list[str] | None = None
    state: str
    error_message: str | None
    created_at: dt.datetime | None = None

class ImportItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    import_job_id: int
    raw_row: dict[str, Any]
    subject_id: str | None
    section_id: str | None
    start_date: dt.date | None
    end_date: dt.date | None
    days_of_week: str | None
    start_time: str | None
    end_time: str | None
    room: str | None
    note: str | None
    status: str

class ImportErrorOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    row: int
    message: str
    column: str | None = None
    value: Any = None

class ImportPreviewOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    job_id: int
    headers: list[str]
    rows: list[dict[str, Any]]
    total_rows: int
    errors: list[ImportErrorOut] = []

class ColumnMappingIn(BaseModel):
    column_map: dict[str, str]

class ValidationResultOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    is_valid: bool
    errors: list[ImportErrorOut]
    warnings: list[ImportErrorOut]

class ImportSummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_rows: int
    created: int
    skipped: int
    failed: int

class ImportDetailOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    row: int
    action: str
    subject_name: str | None = None
    section_code: str | None = None
    message: str | None = None

class ImportResultOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    job_id: int
    state: str
    summary: ImportSummaryOut
    details: list[ImportDetailOut] = []

class ApplyQueuedOut(BaseModel):
    job_id: int
    state: str
    queued: bool = True

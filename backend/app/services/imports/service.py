from __future__ import annotations

import datetime as dt
from dataclasses import asdict, dataclass, field
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import ImportStateError, NotFoundError
from app.core.logging import logger
from app.crud import import_items, import_jobs
from app.db.models.import_item import ImportItem, ImportItemStatus
from app.db.models.import_job import ImportJob, ImportJobState
from app.services.imports.parser import ImportError, parse_upload
from app.services.validation import is_valid_date, is_valid_days_of_week, is_valid_time

REQUIRED_FIELDS = ("subjectName", "sectionCode", "startTime", "endTime", "daysOfWeek")

DAY_ALIASES = {
    "1": "MO", "2": "TU", "3": "WE", "4": "TH", "5": "FR", "6": "SA", "7": "SU",
    "MON": "MO", "TUE": "TU", "WED": "WE", "THU": "TH", "FRI": "FR", "SAT": "SA", "SUN": "SU",
    "MONDAY": "MO", "TUESDAY": "TU", "WEDNESDAY": "WE", "THURSDAY": "TH",
    "FRIDAY": "FR", "SATURDAY": "SA", "SUNDAY": "SU",
}
DAY_CODES = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")

# bounded text columns of import_item
FIELD_LIMITS = {
    name: ImportItem.__table__.c[name].type.length
    for name in ("subject_id", "section_id", "room")
}


@dataclass
class ImportPreview:
    job_id: int
    headers: list[str]
    rows: list[dict[str, Any]]
    total_rows: int
    errors: list[ImportError] = field(default_factory=list)


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[ImportError]
    warnings: list[ImportError]


@dataclass
class ImportSummary:
    total_rows: int = 0
    created: int = 0
    skipped: int = 0
    failed: int = 0


@dataclass
class ImportDetail:
    row: int
    action: str  # created|skipped|failed
    subject_name: str | None = None
    section_code: str | None = None
    message: str | None = None


@dataclass
class ImportResult:
    job_id: int
    state: str
    summary: ImportSummary
    details: list[ImportDetail] = field(default_factory=list)


# -----------------------------
# Helpers
# -----------------------------
def _column_for(column_map: dict[str, str], target: str) -> str | None:
    for column, mapped in column_map.items():
        if mapped == target:
            return column
    return None


def map_row(raw_row: dict[str, Any], column_map: dict[str, str] | None) -> dict[str, Any]:
    mapped: dict[str, Any] = {}
    for column, target in (column_map or {}).items():
        if target and column in raw_row:
            mapped[target] = raw_row[column]
    return mapped


def _blank(v: Any) -> bool:
    return v is None or (isinstance(v, str) and not v.strip())


def normalize_time(value: Any) -> str:
    s = str(value).strip()
    if not is_valid_time(s):
        raise ValueError(f"Invalid time format: {s}")
    hours, minutes = s.split(":")
    return f"{int(hours):02d}:{minutes}"


def normalize_days(value: Any) -> str:
    parts = [p for p in str(value).strip().upper().replace(",", " ").split() if p]
    days: list[str] = []
    for part in parts:
        day = DAY_ALIASES.get(part, part)
        if day not in DAY_CODES:
            raise ValueError(f"Invalid day format: {part}")
        if day not in days:
            days.append(day)
    if not days:
        raise ValueError("No days of week given")
    return ",".join(days)


def _parse_date(value: Any) -> dt.date | None:
    if _blank(value):
        return None
    s = str(value).strip()
    if not is_valid_date(s):
        raise ValueError(f"Invalid date format: {s}")
    return dt.date.fromisoformat(s)


# -----------------------------
# Jobs
# -----------------------------
def create_import_job(db: Session, user_id: int, file_name: str, content: bytes) -> ImportPreview:
    source_type, parsed = parse_upload(file_name, content)

    job = import_jobs.create(db, {
        "user_id": user_id,
        "source_type": source_type,
        "file_name": file_name,
        "headers": parsed.headers,
        "parse_errors": [asdict(e) for e in parsed.errors],
        "state": ImportJobState.pending.value,
    })

    if parsed.rows:
        try:
            import_items.bulk_create(db, (
                {"import_job_id": job.id, "raw_row": row, "status": ImportItemStatus.preview.value}
                for row in parsed.rows
            ))
        except Exception as e:
            logger.exception("import_items_insert_failed", import_job_id=job.id, error=str(e))
            import_jobs.update(db, job.id, {"state": ImportJobState.failed.value, "error_message": str(e)[:1000]})
            raise

    import_jobs.update(db, job.id, {"state": ImportJobState.preview.value})
    logger.info(
        "import_job_created",
        import_job_id=job.id,
        user_id=user_id,
        source_type=source_type,
        rows=len(parsed.rows),
        parse_errors=len(parsed.errors),
    )
    return ImportPreview(
        job_id=job.id,
        headers=parsed.headers,
        rows=parsed.rows[: settings.IMPORT_PREVIEW_ROWS],
        total_rows=len(parsed.rows),
        errors=parsed.errors,
    )


def get_import_job(db: Session, job_id: int, user_id: int) -> ImportJob:
    job = import_jobs.find_by_id(db, job_id)
    if not job or job.user_id != user_id:
        raise NotFoundError("Import job not found")
    return job


def list_user_import_jobs(db: Session, user_id: int, state: str | None = None) -> list[ImportJob]:
    if state:
        return import_jobs.find_by_user_id_and_state(db, user_id, state)
    return import_jobs.find_by_user_id(db, user_id)


def get_import_preview(db: Session, job_id: int, user_id: int) -> ImportPreview:
    job = get_import_job(db, job_id, user_id)
    items = import_items.find_by_import_job_id(db, job.id)
    if job.headers is not None:
        headers = list(job.headers)
    else:
        headers = list(items[0].raw_row.keys()) if items else []
    return ImportPreview(
        job_id=job.id,
        headers=headers,
        rows=[i.raw_row for i in items[: settings.IMPORT_PREVIEW_ROWS]],
        total_rows=len(items),
        errors=[ImportError(**e) for e in job.parse_errors or []],
    )


def list_job_items(db: Session, job_id: int, user_id: int, status: str | None = None) -> list[ImportItem]:
    job = get_import_job(db, job_id, user_id)
    if status:
        return import_items.find_by_import_job_id_and_status(db, job.id, status)
    return import_items.find_by_import_job_id(db, job.id)


def update_column_mapping(db: Session, job_id: int, user_id: int, column_map: dict[str, str]) -> ImportJob:
    job = get_import_job(db, job_id, user_id)
    if job.state != ImportJobState.preview.value:
        raise ImportStateError("Can only update column mapping for jobs in preview state")
    return import_jobs.update(db, job.id, {"column_map": dict(column_map)})


def validate_import_data(db: Session, job_id: int, user_id: int) -> ValidationResult:
    job = get_import_job(db, job_id, user_id)
    if not job.column_map:
        raise ImportStateError("Column mapping is required before validation")

    column_map: dict[str, str] = job.column_map
    errors: list[ImportError] = []
    warnings: list[ImportError] = []

    for target in REQUIRED_FIELDS:
        if _column_for(column_map, target) is None:
            errors.append(ImportError(row=0, message=f"Required field '{target}' is not mapped to any column"))

    checks = (
        ("startTime", is_valid_time, errors, "Invalid time format. Expected HH:mm (24-hour format)"),
        ("endTime", is_valid_time, errors, "Invalid time format. Expected HH:mm (24-hour format)"),
        ("daysOfWeek", is_valid_days_of_week, errors,
         'Invalid days format. Expected comma-separated days (e.g., "MO,WE,FR" or "1,3,5")'),
        ("startDate", is_valid_date, warnings, "Invalid date format. Expected YYYY-MM-DD"),
        ("endDate", is_valid_date, warnings, "Invalid date format. Expected YYYY-MM-DD"),
    )

    items = import_items.find_by_import_job_id(db, job.id)
    for row_num, item in enumerate(items, start=1):
        raw = item.raw_row
        for column, target in column_map.items():
            if target in REQUIRED_FIELDS and _blank(raw.get(column)):
                errors.append(ImportError(
                    row=row_num, column=column, message=f"Required field '{target}' is empty", value=raw.get(column),
                ))
        for target, check, sink, message in checks:
            column = _column_for(column_map, target)
            value = raw.get(column) if column else None
            if column and not _blank(value) and not check(str(value)):
                sink.append(ImportError(row=row_num, column=column, message=message, value=str(value)))

    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def _apply_item(item: ImportItem, column_map: dict[str, str], seen: set[tuple]) -> ImportDetail:
    data = map_row(item.raw_row, column_map)
    subject = data.get("subjectName")
    section = data.get("sectionCode")
    detail = ImportDetail(
        row=0,
        action=ImportItemStatus.failed.value,
        subject_name=str(subject).strip() if not _blank(subject) else None,
        section_code=str(section).strip() if not _blank(section) else None,
    )

    for target in REQUIRED_FIELDS:
        if _blank(data.get(target)):
            detail.message = f"Missing required field: {target}"
            return detail

    try:
        parsed = {
            "subject_id": detail.subject_name,
            "section_id": detail.section_code,
            "start_time": normalize_time(data["startTime"]),
            "end_time": normalize_time(data["endTime"]),
            "days_of_week": normalize_days(data["daysOfWeek"]),
            "start_date": _parse_date(data.get("startDate")),
            "end_date": _parse_date(data.get("endDate")),
            "room": None if _blank(data.get("room")) else str(data["room"]).strip(),
            "note": None if _blank(data.get("note")) else str(data["note"]).strip(),
        }
    except ValueError as e:
        detail.message = str(e)
        return detail

    if parsed["start_time"] >= parsed["end_time"]:
        detail.message = "End time must be after start time"
        return detail

    for name, limit in FIELD_LIMITS.items():
        if parsed[name] is not None and len(parsed[name]) > limit:
            detail.message = f"Value for {name} exceeds {limit} characters"
            return detail

    key = (parsed["subject_id"], parsed["section_id"], parsed["days_of_week"], parsed["start_time"], parsed["end_time"])
    if key in seen:
        detail.action = ImportItemStatus.skipped.value
        detail.message = "Duplicate of an earlier row"
        return detail
    seen.add(key)

    for name, value in parsed.items():
        setattr(item, name, value)
    detail.action = ImportItemStatus.created.value
    return detail


def apply_import_job(db: Session, job_id: int, user_id: int | None = None) -> ImportResult:
    """Turn every preview item of a job into a schedule entry.

    Items end up ``created``, ``skipped`` (duplicate row) or ``failed``. The job
    becomes ``applied`` when no item failed, otherwise ``failed``.
    """
    job = import_jobs.find_by_id(db, job_id)
    if not job or (user_id is not None and job.user_id != user_id):
        raise NotFoundError("Import job not found")
    if job.state != ImportJobState.preview.value:
        raise ImportStateError("Import job must be in preview state")
    if not job.column_map:
        raise ImportStateError("Column mapping is required")

    items = import_items.find_by_import_job_id(db, job.id)
    summary = ImportSummary(total_rows=len(items))
    result = ImportResult(job_id=job.id, state=job.state, summary=summary)
    seen: set[tuple] = set()

    for row_num, item in enumerate(items, start=1):
        detail = _apply_item(item, job.column_map, seen)
        detail.row = row_num
        item.status = detail.action
        result.details.append(detail)
        if detail.action == ImportItemStatus.created.value:
            summary.created += 1
        elif detail.action == ImportItemStatus.skipped.value:
            summary.skipped += 1
        else:
            summary.failed += 1

    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("import_items_apply_failed", import_job_id=job.id, error=str(e))
        import_jobs.update(db, job.id, {"state": ImportJobState.failed.value, "error_message": str(e)[:1000]})
        raise

    state = ImportJobState.applied.value if summary.failed == 0 else ImportJobState.failed.value
    import_jobs.update(db, job.id, {
        "state": state,
        "error_message": f"{summary.failed} rows failed" if summary.failed else None,
    })
    result.state = state
    logger.info(
        "import_job_applied",
        import_job_id=job.id,
        state=state,
        created=summary.created,
        skipped=summary.skipped,
        failed=summary.failed,
    )
    return result


def get_import_result(db: Session, job_id: int, user_id: int) -> ImportResult | None:
    job = get_import_job(db, job_id, user_id)
    if job.state not in (ImportJobState.applied.value, ImportJobState.failed.value):
        return None

    items = import_items.find_by_import_job_id(db, job.id)
    summary = ImportSummary(total_rows=len(items))
    result = ImportResult(job_id=job.id, state=job.state, summary=summary)
    for row_num, item in enumerate(items, start=1):
        data = map_row(item.raw_row, job.column_map)
        if item.status == ImportItemStatus.created.value:
            summary.created += 1
        elif item.status == ImportItemStatus.failed.value:
            summary.failed += 1
        else:
            summary.skipped += 1
        result.details.append(ImportDetail(
            row=row_num,
            action=item.status,
            subject_name=data.get("subjectName"),
            section_code=data.get("sectionCode"),
            message="Processing failed" if item.status == ImportItemStatus.failed.value else None,
        ))
    return result


def delete_import_job(db: Session, job_id: int, user_id: int) -> None:
    job = get_import_job(db, job_id, user_id)
    if job.state == ImportJobState.applied.value:
        raise ImportStateError("Cannot delete applied import jobs")
    import_jobs.delete(db, job.id)
    logger.info("import_job_deleted", import_job_id=job_id, user_id=user_id)

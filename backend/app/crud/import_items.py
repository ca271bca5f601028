from typing import Any, Iterable, Mapping

from sqlalchemy.orm import Session

from app.core.logging import logger
from app.db.models.import_item import ImportItem, ITEM_STATUSES

_UPDATABLE = (
    "raw_row",
    "subject_id",
    "section_id",
    "start_date",
    "end_date",
    "days_of_week",
    "start_time",
    "end_time",
    "room",
    "note",
    "status",
)

def _check_status(status: str) -> None:
    if status not in ITEM_STATUSES:
        raise ValueError(f"Unknown import item status: {status!r}")

def _build(data: Mapping[str, Any]) -> ImportItem:
    if "status" in data:
        _check_status(data["status"])
    fields = {k: v for k, v in data.items() if k in _UPDATABLE}
    return ImportItem(import_job_id=data["import_job_id"], **fields)

def create(db: Session, data: Mapping[str, Any]) -> ImportItem:
    item = _build(data)
    db.add(item)
    db.commit()
    db.refresh(item)
    return item

def find_by_id(db: Session, item_id: int) -> ImportItem | None:
    return db.query(ImportItem).filter(ImportItem.id == item_id).one_or_none()

def find_by_import_job_id(db: Session, import_job_id: int) -> list[ImportItem]:
    return (
        db.query(ImportItem)
        .filter(ImportItem.import_job_id == import_job_id)
        .order_by(ImportItem.id)
        .all()
    )

def find_by_import_job_id_and_status(db: Session, import_job_id: int, status: str) -> list[ImportItem]:
    return (
        db.query(ImportItem)
        .filter(ImportItem.import_job_id == import_job_id, ImportItem.status == status)
        .order_by(ImportItem.id)
        .all()
    )

def bulk_create(db: Session, items: Iterable[Mapping[str, Any]]) -> list[ImportItem]:
    """Insert every item in one transaction; nothing is stored if any row fails."""
    try:
        objs = [_build(data) for data in items]
        db.add_all(objs)
        db.commit()
    except Exception:
        db.rollback()
        raise
    for obj in objs:
        db.refresh(obj)
    return objs

def update_status(db: Session, item_id: int, status: str) -> None:
    _check_status(status)
    updated = db.query(ImportItem).filter(ImportItem.id == item_id).update({ImportItem.status: status})
    db.commit()
    if not updated:
        logger.warning("import_item_status_noop", import_item_id=item_id, status=status)

def update(db: Session, item_id: int, data: Mapping[str, Any]) -> ImportItem | None:
    item = find_by_id(db, item_id)
    if not item:
        return None
    if "status" in data:
        _check_status(data["status"])
    for key in _UPDATABLE:
        if key in data:
            setattr(item, key, data[key])
    db.commit()
    db.refresh(item)
    return item

def delete(db: Session, item_id: int) -> None:
    db.query(ImportItem).filter(ImportItem.id == item_id).delete()
    db.commit()

def find_all(db: Session) -> list[ImportItem]:
    return db.query(ImportItem).order_by(ImportItem.id).all()

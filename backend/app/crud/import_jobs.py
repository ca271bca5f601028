from typing import Any, Mapping

from sqlalchemy.orm import Session, selectinload

from app.db.models.import_job import ImportJob

_UPDATABLE = ("source_type", "file_name", "column_map", "headers", "parse_errors", "state", "error_message")

def create(db: Session, data: Mapping[str, Any]) -> ImportJob:
    job = ImportJob(user_id=data["user_id"], **{k: v for k, v in data.items() if k in _UPDATABLE})
    db.add(job)
    db.commit()
    db.refresh(job)
    return job

def find_by_id(db: Session, job_id: int) -> ImportJob | None:
    return db.query(ImportJob).filter(ImportJob.id == job_id).one_or_none()

def find_by_user_id(db: Session, user_id: int) -> list[ImportJob]:
    return (
        db.query(ImportJob)
        .filter(ImportJob.user_id == user_id)
        .order_by(ImportJob.created_at.desc(), ImportJob.id.desc())
        .all()
    )

def find_by_user_id_and_state(db: Session, user_id: int, state: str) -> list[ImportJob]:
    return (
        db.query(ImportJob)
        .filter(ImportJob.user_id == user_id, ImportJob.state == state)
        .order_by(ImportJob.created_at.desc(), ImportJob.id.desc())
        .all()
    )

def find_with_items(db: Session, job_id: int) -> ImportJob | None:
    return (
        db.query(ImportJob)
        .options(selectinload(ImportJob.items))
        .filter(ImportJob.id == job_id)
        .one_or_none()
    )

def update(db: Session, job_id: int, data: Mapping[str, Any]) -> ImportJob | None:
    job = find_by_id(db, job_id)
    if not job:
        return None
    for key in _UPDATABLE:
        if key in data:
            setattr(job, key, data[key])
    db.commit()
    db.refresh(job)
    return job

def delete(db: Session, job_id: int) -> None:
    job = find_by_id(db, job_id)
    if job:
        # ORM delete so the item cascade runs on backends without FK enforcement
        db.delete(job)
        db.commit()

def find_all(db: Session) -> list[ImportJob]:
    return db.query(ImportJob).order_by(ImportJob.id).all()

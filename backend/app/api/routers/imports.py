from fastapi import APIRouter, Depends, UploadFile, File, HTTPException, Query
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import get_db, get_current_user
from app.core.errors import ImportStateError, NotFoundError
from app.db.models.import_item import ITEM_STATUSES
from app.db.models.import_job import ImportJobState
from app.db.models.user import User
from app.schemas.imports import (
    ApplyQueuedOut,
    ColumnMappingIn,
    ImportItemOut,
    ImportJobOut,
    ImportPreviewOut,
    ImportResultOut,
    ValidationResultOut,
)
from app.services.imports import service
from app.services.imports.parser import FileRejected
from app.worker.tasks import apply_import_task

router = APIRouter()

_JOB_STATES = tuple(s.value for s in ImportJobState)


def _job_or_404(db: Session, job_id: int, user: User):
    try:
        return service.get_import_job(db, job_id, user.id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/upload", response_model=ImportPreviewOut)
def upload_file(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    content = file.file.read()
    try:
        return service.create_import_job(db, user.id, file.filename or "", content)
    except FileRejected as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/jobs", response_model=list[ImportJobOut])
def get_jobs(
    state: str | None = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if state is not None and state not in _JOB_STATES:
        raise HTTPException(status_code=400, detail=f"Unknown state: {state}")
    return service.list_user_import_jobs(db, user.id, state)


@router.get("/jobs/{job_id}", response_model=ImportJobOut)
def get_job(job_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return _job_or_404(db, job_id, user)


@router.get("/jobs/{job_id}/preview", response_model=ImportPreviewOut)
def get_preview(job_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    _job_or_404(db, job_id, user)
    return service.get_import_preview(db, job_id, user.id)


@router.get("/jobs/{job_id}/items", response_model=list[ImportItemOut])
def get_items(
    job_id: int,
    status: str | None = Query(None),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if status is not None and status not in ITEM_STATUSES:
        raise HTTPException(status_code=400, detail=f"Unknown status: {status}")
    _job_or_404(db, job_id, user)
    return service.list_job_items(db, job_id, user.id, status)


@router.put("/jobs/{job_id}/mapping", response_model=ImportJobOut)
def put_mapping(
    job_id: int,
    data: ColumnMappingIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    _job_or_404(db, job_id, user)
    try:
        return service.update_column_mapping(db, job_id, user.id, data.column_map)
    except ImportStateError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/jobs/{job_id}/validate", response_model=ValidationResultOut)
def post_validate(job_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    _job_or_404(db, job_id, user)
    try:
        return service.validate_import_data(db, job_id, user.id)
    except ImportStateError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/jobs/{job_id}/apply", response_model=ImportResultOut | ApplyQueuedOut)
def post_apply(job_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    job = _job_or_404(db, job_id, user)
    if job.state != ImportJobState.preview.value:
        raise HTTPException(status_code=409, detail="Import job must be in preview state")
    if not job.column_map:
        raise HTTPException(status_code=400, detail="Column mapping is required")

    if settings.IMPORT_APPLY_ASYNC:
        apply_import_task.delay(job.id)
        return ApplyQueuedOut(job_id=job.id, state=job.state)

    try:
        return service.apply_import_job(db, job.id, user.id)
    except ImportStateError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/jobs/{job_id}/result", response_model=ImportResultOut)
def get_result(job_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    _job_or_404(db, job_id, user)
    result = service.get_import_result(db, job_id, user.id)
    if result is None:
        raise HTTPException(status_code=404, detail="Import job has not been applied yet")
    return result


@router.delete("/jobs/{job_id}")
def delete_job(job_id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    _job_or_404(db, job_id, user)
    try:
        service.delete_import_job(db, job_id, user.id)
    except ImportStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return {"status": "ok"}

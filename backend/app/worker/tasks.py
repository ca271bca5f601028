from sqlalchemy.orm import Session

from app.worker.celery_app import celery_app
from app.core.logging import logger
from app.db.session import SessionLocal
from app.db.models.import_job import ImportJobState
from app.core.errors import ImportStateError
from app.crud import import_jobs
from app.services.imports.service import apply_import_job


@celery_app.task(name="imports.apply_import", bind=True)
def apply_import_task(self, import_job_id: int):
    db: Session = SessionLocal()
    try:
        if not import_jobs.find_by_id(db, import_job_id):
            logger.error("import_job_missing", import_job_id=import_job_id)
            return None

        result = apply_import_job(db, import_job_id)
        return {
            "import_job_id": result.job_id,
            "state": result.state,
            "created": result.summary.created,
            "skipped": result.summary.skipped,
            "failed": result.summary.failed,
        }

    except ImportStateError as e:
        logger.warning("import_apply_rejected", import_job_id=import_job_id, error=str(e))
        raise

    except Exception as e:
        logger.exception("import_apply_failed", import_job_id=import_job_id, error=str(e))

        # session may be in aborted state -> rollback before writing the failure
        try:
            db.rollback()
            import_jobs.update(db, import_job_id, {
                "state": ImportJobState.failed.value,
                "error_message": str(e)[:1000],
            })
        except Exception as e2:
            logger.exception(
                "import_apply_failed_status_update_failed",
                import_job_id=import_job_id,
                error=str(e2),
            )

        raise

    finally:
        db.close()

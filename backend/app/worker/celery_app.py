from celery import Celery

from app.core.config import settings

celery_app = Celery("class_sync", broker=settings.REDIS_URL, backend=settings.REDIS_URL)
celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    task_track_started=True,
    task_always_eager=settings.ENV == "test",
)
celery_app.autodiscover_tasks(["app.worker"])

"""Celery application for train job reconciliation."""

from celery import Celery

from orchestrator.app.config import get_settings

settings = get_settings()

app = Celery(
    "orchestrator",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["orchestrator.app.tasks"],
)
app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    # Hard stop for a reconcile stuck past its per-request timeouts
    task_soft_time_limit=settings.task_soft_time_limit,
    task_time_limit=settings.task_time_limit,
)

"""
Celery workers module.

Runs document ingestion outside the request that uploaded the file, and
periodically sweeps documents whose ingestion was lost.

Dependencies: celery, finance_docs.configs
System role: Background task processing
"""

from celery import Celery

from finance_docs.configs import get_settings
from finance_docs.configs.celery_config import CelerySettings


def create_celery_app(celery_config: CelerySettings | None = None) -> Celery:
    """
    Create the Celery application.

    Args:
        celery_config: Celery settings (from environment if None)

    Returns:
        Celery: Configured application with the beat schedule installed
    """
    celery_config = celery_config or get_settings().celery

    app = Celery(
        "finance_docs",
        broker=celery_config.broker_url,
        backend=celery_config.result_backend_url,
        include=["finance_docs.workers.tasks.document_ingestion"],
    )

    app.conf.update(
        task_serializer=celery_config.task_serializer,
        result_serializer=celery_config.result_serializer,
        accept_content=celery_config.accept_content,
        timezone=celery_config.timezone,
        task_always_eager=celery_config.task_always_eager,
        task_acks_late=True,
        task_reject_on_worker_lost=True,
        worker_prefetch_multiplier=1,
        beat_schedule={
            "sweep-stale-documents": {
                "task": "finance_docs.sweep_stale_documents",
                "schedule": float(celery_config.stale_sweep_interval_seconds),
            },
        },
    )
    return app


celery_app = create_celery_app()

"""Celery application configuration."""

from celery import Celery

from config import settings

# Create Celery app
celery_app = Celery(
    "beacon_visibility",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
)

# Configure Celery
celery_app.conf.update(
    # Serialization: payloads and results are plain JSON
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Task routing - analyses run on their own queue
    task_routes={
        "worker.tasks.*": {"queue": "analyses"},
    },

    # Task execution settings
    task_acks_late=True,  # Ack only once the report is stored
    task_reject_on_worker_lost=True,  # Requeue the run if the worker dies
    # An analysis already fans out to threads and citation APIs
    worker_prefetch_multiplier=1,

    # Result expiration (1 hour); reports live in Postgres
    result_expires=3600,

    # Keep retrying the broker while it starts up
    broker_connection_retry_on_startup=True,
)

# Auto-discover tasks from the worker.tasks module
celery_app.autodiscover_tasks(["worker"])

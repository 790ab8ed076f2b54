"""
Celery Configuration for Catalog Backend

This module configures Celery for background jobs. The only job today is the
out-of-request deletion of orphaned product images, used when
CATALOG["IMAGE_GC_ASYNC"] is enabled.
"""

import os

from celery import Celery


# Set the default Django settings module for the 'celery' program.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "catalogBackend.settings")

# Create Celery app
app = Celery("catalogBackend")

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
app.config_from_object("django.conf:settings", namespace="CELERY")

# Load task modules from all registered Django apps.
app.autodiscover_tasks()

app.conf.update(
    task_routes={
        "marketplace.tasks.*": {"queue": "catalog_tasks"},
    },
    # Task execution settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    # Results are never read back, deletions are fire-and-forget
    task_ignore_result=True,
    # Worker settings
    worker_max_tasks_per_child=1000,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=5 * 60,
    task_soft_time_limit=4 * 60,
)

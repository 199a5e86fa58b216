"""
Celery application for CementOps.
Broker and eager mode come from Django settings (CELERY_* namespace);
settings_dev runs tasks synchronously so no Redis is needed locally.
"""

import os
from celery import Celery
from celery.schedules import crontab

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "cementops.settings_dev")

app = Celery("cementops")
app.config_from_object("django.conf:settings", namespace="CELERY")

app.conf.beat_schedule = {
    "notify-expiring-documents": {
        "task":     "apps.notifications.tasks.notify_expiring_documents",
        "schedule": crontab(hour=6, minute=30),
    },
}

app.autodiscover_tasks()

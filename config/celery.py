import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("rentify")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Move-in reminders for tomorrow, every day at 09:00
    "send-move-in-reminders": {
        "task": "bookings.send_move_in_reminders",
        "schedule": crontab(minute=0, hour=9),
    },
}

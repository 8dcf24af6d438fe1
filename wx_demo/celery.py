import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "wx_demo.settings")

app = Celery("wx_demo")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()

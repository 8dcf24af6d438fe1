import importlib
import os
from unittest.mock import patch

from django.test import SimpleTestCase

import wx_demo.settings as project_settings

_CELERY_ENV = ("REDIS_URL", "CELERY_BROKER_URL", "CELERY_TASK_ALWAYS_EAGER", "LOG_DIR")


class CeleryEagerDefaultTests(SimpleTestCase):
    def _load_settings(self, **env):
        environ = {key: value for key, value in os.environ.items() if key not in _CELERY_ENV}
        environ.update(env)
        self.addCleanup(importlib.reload, project_settings)
        with patch.dict(os.environ, environ, clear=True):
            return importlib.reload(project_settings)

    def test_memory_broker_runs_tasks_eagerly(self):
        loaded = self._load_settings()

        self.assertEqual(loaded.CELERY_BROKER_URL, "memory://")
        self.assertTrue(loaded.CELERY_TASK_ALWAYS_EAGER)

    def test_redis_broker_queues_tasks(self):
        loaded = self._load_settings(REDIS_URL="redis://127.0.0.1:6379/0")

        self.assertEqual(loaded.CELERY_BROKER_URL, "redis://127.0.0.1:6379/0")
        self.assertFalse(loaded.CELERY_TASK_ALWAYS_EAGER)

    def test_explicit_setting_wins(self):
        loaded = self._load_settings(CELERY_TASK_ALWAYS_EAGER="false")

        self.assertFalse(loaded.CELERY_TASK_ALWAYS_EAGER)

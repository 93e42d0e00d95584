"""
Settings for the test suite.

Fills in the environment the test run needs (no Postgres, Redis or broker)
and then loads the regular settings. Values already present in the
environment win.
"""

import os

os.environ.setdefault("SECRET_KEY", "insecure-test-secret-key")
os.environ.setdefault("DEBUG", "False")
os.environ.setdefault("SECURE_SSL_REDIRECT", "False")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "True")
os.environ.setdefault("CELERY_BROKER_URL", "memory://")
os.environ.setdefault("CELERY_RESULT_BACKEND", "cache+memory://")
os.environ.setdefault("CHANNEL_LAYER_IN_MEMORY", "True")
os.environ.setdefault("CHAT_REALTIME_PUBLISHER", "chat.realtime.InMemoryPublisher")
os.environ.setdefault("LOG_FILE_NAME", "test.log")

from config.settings import *  # noqa: E402,F401,F403

"""
Celery configuration for the Django application.

Celery runs the realtime fan-out that follows a chat mutation (refreshed
conversation summaries and unread totals), so HTTP responses do not wait
for it.

This configuration uses Redis as both the message broker and result backend.
Tasks are auto-discovered from all installed Django apps.

Setting CELERY_TASK_ALWAYS_EAGER=True runs every task inline, which is what
the test suite does.

Usage:
    from chat.tasks import fan_out_message_sent

    fan_out_message_sent.delay(sender.id, receiver.id)

For more information, see:
https://docs.celeryq.dev/en/stable/django/first-steps-with-django.html
"""

import os

from celery import Celery

# Set the default Django settings module for the Celery worker
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

# The name should match the Django project name
app = Celery("config")

# All Celery settings are prefixed with CELERY_ in settings.py
app.config_from_object("django.conf:settings", namespace="CELERY")

# Celery will look for a tasks.py module in each installed app
app.autodiscover_tasks()

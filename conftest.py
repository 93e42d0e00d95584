"""
Root pytest configuration for the Django project.

pytest-django reads DJANGO_SETTINGS_MODULE from pyproject.toml
(config.settings_test). App-specific fixtures are defined in each app's
tests/conftest.py; shared hooks live in app/conftest.py.
"""

import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings_test")

"""Django settings for django-transit tests.

Runs on in-memory sqlite by default. Set POSTGRES_DB to run against
PostgreSQL, which the row-locking tests in test_concurrency.py need.
"""

import os

SECRET_KEY = 'test-secret-key-not-for-production'

if os.environ.get('POSTGRES_DB'):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': os.environ['POSTGRES_DB'],
            'USER': os.environ.get('POSTGRES_USER', 'postgres'),
            'PASSWORD': os.environ.get('POSTGRES_PASSWORD', 'postgres'),
            'HOST': os.environ.get('POSTGRES_HOST', 'localhost'),
            'PORT': os.environ.get('POSTGRES_PORT', '5432'),
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': ':memory:',
        }
    }

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'django_transit',
]

USE_TZ = True
TIME_ZONE = 'Africa/Kigali'

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Deliver notifications inline and record them instead of sending
TRANSIT_NOTIFIER = 'tests.notifiers.RecordingNotifier'
TRANSIT_NOTIFICATION_DISPATCH = 'sync'
TRANSIT_NOTIFICATION_MAX_ATTEMPTS = 3
TRANSIT_NOTIFICATION_RETRY_BASE_SECONDS = 60

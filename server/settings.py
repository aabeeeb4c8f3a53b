"""
Django settings for the comments API.

Everything deployment specific is read from the environment.
"""

import os
from pathlib import Path

from server.security.conf import apply_secure_defaults

BASE_DIR = Path(__file__).resolve().parent.parent

APP_ENV = os.environ.get('APP_ENV', 'development')
IS_PRODUCTION = APP_ENV == 'production'

SECRET_KEY = os.environ.get(
    'SECRET_KEY', 'django-insecure-development-key-do-not-use-in-production'
)

DEBUG = os.environ.get('DEBUG', str(not IS_PRODUCTION)).lower() in ('1', 'true', 'yes')

ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get('ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver').split(',')
    if host.strip()
]

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'rest_framework',
    'server.apps.ServerConfig',
    'input_validation.apps.InputValidationConfig',
    'users.apps.UsersConfig',
    'comments.apps.CommentsConfig',
]

# The security stack is installed by apply_secure_defaults() below
MIDDLEWARE = []

ROOT_URLCONF = 'server.urls'

WSGI_APPLICATION = 'server.wsgi.application'

# Database
if os.environ.get('DB_ENGINE'):
    DATABASES = {
        'default': {
            'ENGINE': os.environ['DB_ENGINE'],
            'NAME': os.environ.get('DB_NAME', 'comments'),
            'USER': os.environ.get('DB_USER', ''),
            'PASSWORD': os.environ.get('DB_PASSWORD', ''),
            'HOST': os.environ.get('DB_HOST', 'localhost'),
            'PORT': os.environ.get('DB_PORT', ''),
        }
    }
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'comments-api',
    }
}

REDIS_URL = os.environ.get('REDIS_URL')

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = False
USE_TZ = True

FRONTEND_URL = os.environ.get('FRONTEND_URL', 'http://localhost:3000')

API_SECURITY = {
    'RATE_LIMITING': {
        'BACKEND': os.environ.get('RATE_LIMIT_BACKEND', 'redis' if REDIS_URL else 'cache'),
        'TRUST_X_FORWARDED_FOR': os.environ.get('TRUST_X_FORWARDED_FOR', '').lower() in ('1', 'true', 'yes'),
    },
    'CORS': {
        'ALLOWED_ORIGINS': sorted({FRONTEND_URL, 'http://localhost:3000'}),
    },
    'ENABLE_REQUEST_LOGGING': not IS_PRODUCTION,
}

USERS = {
    'RANDOM_USER_URL': os.environ.get('RANDOM_USER_API_URL', 'https://randomuser.me/api/'),
    'POPULATE_COUNT': 3,
    'TIMEOUT': 10,
    'ATOMIC_POPULATE': False,
}

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} {levelname} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': os.environ.get('DJANGO_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
        # Application loggers propagate to the root handler
        'server': {'level': 'INFO'},
        'input_validation': {'level': 'INFO'},
        'users': {'level': 'INFO'},
        'comments': {'level': 'INFO'},
    },
}

apply_secure_defaults(globals())

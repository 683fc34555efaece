"""
Django settings for the community water billing project.

Deployment values come from environment variables; everything has a
development default so the project runs out of the box on SQLite.
"""
import os
from decimal import Decimal
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def env_list(name, default=''):
    return [item.strip() for item in os.environ.get(name, default).split(',') if item.strip()]


# ── Core ───────────────────────────────────────────────────
SECRET_KEY    = os.environ.get('DJANGO_SECRET_KEY', 'dev-insecure-change-me')
DEBUG         = env_bool('DJANGO_DEBUG', True)
ALLOWED_HOSTS = env_list('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver')

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'billing',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF     = 'community_water.urls'
WSGI_APPLICATION = 'community_water.wsgi.application'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

# ── Database ───────────────────────────────────────────────
DATABASES = {
    'default': {
        'ENGINE':   os.environ.get('DJANGO_DB_ENGINE', 'django.db.backends.sqlite3'),
        'NAME':     os.environ.get('DJANGO_DB_NAME', str(BASE_DIR / 'db.sqlite3')),
        'USER':     os.environ.get('DJANGO_DB_USER', ''),
        'PASSWORD': os.environ.get('DJANGO_DB_PASSWORD', ''),
        'HOST':     os.environ.get('DJANGO_DB_HOST', ''),
        'PORT':     os.environ.get('DJANGO_DB_PORT', ''),
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# ── Passwords ──────────────────────────────────────────────
AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

# ── I18N / time ────────────────────────────────────────────
LANGUAGE_CODE = 'en-us'
TIME_ZONE     = os.environ.get('DJANGO_TIME_ZONE', 'UTC')
USE_I18N      = True
USE_TZ        = True

STATIC_URL = 'static/'

# ── Billing ────────────────────────────────────────────────
WATER_PRICE_DEFAULT  = Decimal(os.environ.get('WATER_PRICE_DEFAULT', '1.5'))
BILLING_CYCLE_DAYS   = int(os.environ.get('BILLING_CYCLE_DAYS', '30'))
METER_ID_PREFIX      = os.environ.get('METER_ID_PREFIX', 'WTR')
METER_ID_DIGITS      = int(os.environ.get('METER_ID_DIGITS', '3'))
TEMP_PASSWORD_LENGTH = int(os.environ.get('TEMP_PASSWORD_LENGTH', '8'))

# ── Logging ────────────────────────────────────────────────
LOG_LEVEL = os.environ.get('DJANGO_LOG_LEVEL', 'INFO')

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
        'billing': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
    },
}

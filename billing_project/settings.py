"""
Django settings for billing_project.

All deploy-specific values come from the environment (or a .env file next to
manage.py) via django-environ.
"""
from pathlib import Path
import os

import environ


BASE_DIR = Path(__file__).resolve().parent.parent

env = environ.Env()

ENV_FILE = os.environ.get('ENV_FILE', '.env')
if (BASE_DIR / ENV_FILE).exists():
    environ.Env.read_env(os.path.join(BASE_DIR, ENV_FILE))

SECRET_KEY = env('DJANGO_SECRET_KEY', default='django-insecure-billing-dev-key')
DEBUG = env.bool('DEBUG', default=True)
ALLOWED_HOSTS = env.list('ALLOWED_HOSTS', default=['localhost', '127.0.0.1', 'testserver'])

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    'rest_framework',

    'Billing.core',
    'Billing.clients',
    'Billing.orders',
    'Billing.Invoice',
    'Billing.payments',
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

ROOT_URLCONF = 'billing_project.urls'
WSGI_APPLICATION = 'billing_project.wsgi.application'

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

DATABASES = {
    'default': env.db(default=f'sqlite:///{BASE_DIR / "db.sqlite3"}')
}

# SQLite serializes writers only when transactions start IMMEDIATE; the
# payment ledger relies on that where select_for_update is a no-op.
if DATABASES['default']['ENGINE'] == 'django.db.backends.sqlite3':
    DATABASES['default'].setdefault('OPTIONS', {}).update({
        'transaction_mode': 'IMMEDIATE',
        'timeout': env.int('SQLITE_TIMEOUT', default=20),
    })
    DATABASES['default']['TEST'] = {
        'NAME': env('TEST_DATABASE_NAME', default=str(BASE_DIR / 'test_db.sqlite3')),
    }

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LANGUAGE_CODE = 'en-us'
TIME_ZONE = env('TIME_ZONE', default='UTC')
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

REST_FRAMEWORK = {
    'DEFAULT_RENDERER_CLASSES': [
        'billing_project.response_formatter.StandardizedJSONRenderer',
    ],
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
    ],
    'EXCEPTION_HANDLER': 'billing_project.response_formatter.custom_exception_handler',
    'DEFAULT_AUTHENTICATION_CLASSES': [],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.AllowAny',
    ],
    'UNAUTHENTICATED_USER': None,
    'TEST_REQUEST_DEFAULT_FORMAT': 'json',
}

# ---- Billing configuration ----
BILLING_DEFAULT_NET_TERMS_DAYS = env.int('BILLING_DEFAULT_NET_TERMS_DAYS', default=30)
BILLING_DEFAULT_CURRENCY = env('BILLING_DEFAULT_CURRENCY', default='USD')
BILLING_INVOICE_NUMBER_PREFIX = env('BILLING_INVOICE_NUMBER_PREFIX', default='INV')
BILLING_SCHEDULE_DEFAULT_COUNT = env.int('BILLING_SCHEDULE_DEFAULT_COUNT', default=5)
BILLING_SCHEDULE_MAX_COUNT = env.int('BILLING_SCHEDULE_MAX_COUNT', default=20)
BILLING_UPCOMING_DAYS_AHEAD = env.int('BILLING_UPCOMING_DAYS_AHEAD', default=7)
BILLING_UPCOMING_MAX_DAYS = env.int('BILLING_UPCOMING_MAX_DAYS', default=365)
BILLING_DOWNGRADE_PAID_ON_PAYMENT_UPDATE = env.bool('BILLING_DOWNGRADE_PAID_ON_PAYMENT_UPDATE', default=True)
BILLING_LOG_LEVEL = env('BILLING_LOG_LEVEL', default='INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '{asctime} {levelname} {name}: {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'ERROR',
    },
    'loggers': {
        'Billing': {
            'handlers': ['console'],
            'level': BILLING_LOG_LEVEL,
            'propagate': False,
        },
    },
}

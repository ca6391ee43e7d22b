import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'django-insecure-mgnrega-dashboard-dev-key')
DEBUG = env_bool('DJANGO_DEBUG', True)
ALLOWED_HOSTS = [h for h in os.getenv('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver').split(',') if h]

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'apps.districts',
    'apps.performance',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
]

ROOT_URLCONF = 'mgnrega_dashboard.urls'
WSGI_APPLICATION = 'mgnrega_dashboard.wsgi.application'

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
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.getenv('DATABASE_PATH', str(BASE_DIR / 'db.sqlite3')),
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'Asia/Kolkata'
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'

# The 'mgnrega' cache only expires lazily, so culling is pushed out of reach.
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'mgnrega-default',
    },
    'mgnrega': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'mgnrega-api-responses',
        'TIMEOUT': None,
        'OPTIONS': {
            'MAX_ENTRIES': 10 ** 9,
        },
    },
}

# MGNREGA upstream API (data.gov.in)
MGNREGA_API_BASE_URL = os.getenv('MGNREGA_API_BASE_URL', 'https://api.data.gov.in/resource')
MGNREGA_API_KEY = os.getenv('MGNREGA_API_KEY', '')
MGNREGA_RESOURCE_IDS = {
    'district_performance': os.getenv(
        'MGNREGA_RESOURCE_ID', 'ee03643a-ee4c-48c2-ac30-9f2ff26ab722'
    ),
}
MGNREGA_API_TIMEOUT = float(os.getenv('MGNREGA_API_TIMEOUT', '10'))
MGNREGA_CACHE_TTL_MS = int(os.getenv('MGNREGA_CACHE_TTL_MS', '300000'))
MGNREGA_DISTRICT_LIST_TTL_MS = int(os.getenv('MGNREGA_DISTRICT_LIST_TTL_MS', '3600000'))
MGNREGA_RETRY_ATTEMPTS = int(os.getenv('MGNREGA_RETRY_ATTEMPTS', '3'))
MGNREGA_RETRY_BASE_DELAY_MS = int(os.getenv('MGNREGA_RETRY_BASE_DELAY_MS', '1000'))
MGNREGA_MAX_WORKERS = int(os.getenv('MGNREGA_MAX_WORKERS', '8'))
MGNREGA_STRICT_RECORDS = env_bool('MGNREGA_STRICT_RECORDS', False)

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'loggers': {
        'apps': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': True,
        },
    },
}

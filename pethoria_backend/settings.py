"""
Django settings for pethoria_backend project.
SECURE PRODUCTION CONFIGURATION
"""

import os
import dj_database_url
from pathlib import Path
from datetime import timedelta

# Build paths inside the project like this: BASE_DIR / 'subdir'.
BASE_DIR = Path(__file__).resolve().parent.parent

# --- SECURITY CRITICAL CONFIGURATION ---

# 1. SECRET_KEY: Must serve from environment. Fail if missing.
SECRET_KEY = os.environ.get('SECRET_KEY')
if not SECRET_KEY:
    raise ValueError("CRITICAL: SECRET_KEY environment variable is not set!")

# 2. DEBUG: False by default. Only True if explicitly set.
DEBUG = os.environ.get('DEBUG', 'False') == 'True'

ALLOWED_HOSTS = ['127.0.0.1', 'localhost']

RENDER_EXTERNAL_HOSTNAME = os.environ.get('RENDER_EXTERNAL_HOSTNAME')
if RENDER_EXTERNAL_HOSTNAME:
    ALLOWED_HOSTS.append(RENDER_EXTERNAL_HOSTNAME)


# --- APPLICATION DEFINITION ---

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Third Party Apps
    'rest_framework',
    'rest_framework_simplejwt.token_blacklist', # Necesario para rotación de tokens
    'corsheaders',

    # Local Apps
    'matching',
]

MIDDLEWARE = [
    'whitenoise.middleware.WhiteNoiseMiddleware',
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'pethoria_backend.urls'

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

WSGI_APPLICATION = 'pethoria_backend.wsgi.application'


# --- DATABASE ---
# Optimized connection age for PaaS
DATABASES = {
    'default': dj_database_url.config(
        default=f'sqlite:///{BASE_DIR / "db.sqlite3"}',
        conn_max_age=60, # Reduced to 1 minute to prevent stale connections
        conn_health_checks=True,
    )
}

# Timeout acotado: ninguna consulta del motor de matching debe colgarse
MATCHING_STORE_TIMEOUT_SECONDS = int(os.environ.get('MATCHING_STORE_TIMEOUT_SECONDS', '5'))

if DATABASES['default']['ENGINE'].endswith('sqlite3'):
    DATABASES['default'].setdefault('OPTIONS', {})['timeout'] = MATCHING_STORE_TIMEOUT_SECONDS
elif DATABASES['default']['ENGINE'].endswith('postgresql'):
    DATABASES['default'].setdefault('OPTIONS', {}).update({
        'connect_timeout': MATCHING_STORE_TIMEOUT_SECONDS,
        'options': f'-c statement_timeout={MATCHING_STORE_TIMEOUT_SECONDS * 1000}',
    })


# --- PASSWORD VALIDATION ---
AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]


# --- INTERNATIONALIZATION ---
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True


# --- STATIC FILES ---
STATIC_URL = 'static/'
STATIC_ROOT = os.path.join(BASE_DIR, 'staticfiles')

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'


# --- CORS CONFIGURATION ---
# TODO: Move specific origins to environment variables for better security
CORS_ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "https://pethoria.vercel.app",
]
CORS_ALLOW_CREDENTIALS = True # Added as per audit


# --- REST FRAMEWORK & JWT ---
# Consolidated configuration
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': (
        'rest_framework_simplejwt.authentication.JWTAuthentication',
    ),
    'EXCEPTION_HANDLER': 'matching.exceptions.matching_exception_handler',
    'DEFAULT_THROTTLE_CLASSES': [
        'rest_framework.throttling.AnonRateThrottle',
        'rest_framework.throttling.UserRateThrottle'
    ],
    'DEFAULT_THROTTLE_RATES': {
        'anon': '20/minute', # Basic Rate Limiting
        'user': '100/minute'
    }
}

SIMPLE_JWT = {
    "ACCESS_TOKEN_LIFETIME": timedelta(hours=1), # Increased from 5m
    "REFRESH_TOKEN_LIFETIME": timedelta(days=7), # Reduced from 90d
    "ROTATE_REFRESH_TOKENS": True, # Security feature
    "BLACKLIST_AFTER_ROTATION": True,
    "ALGORITHM": "HS256",
}


# --- MATCHING ---
MATCHING_DEFAULT_RADIUS_MILES = float(os.environ.get('MATCHING_DEFAULT_RADIUS_MILES', '10'))
MATCHING_DEFAULT_LIMIT = int(os.environ.get('MATCHING_DEFAULT_LIMIT', '20'))
MATCHING_MAX_RESULTS = int(os.environ.get('MATCHING_MAX_RESULTS', '50')) # Hard cap, independent of ?limit=
MATCHING_ACTIVE_WINDOW_DAYS = int(os.environ.get('MATCHING_ACTIVE_WINDOW_DAYS', '30'))


# --- LOGGING ---
# Structured logging for production (Console output for Render)
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'INFO',
    },
    'loggers': {
        'matching': {
            'handlers': ['console'],
            'level': os.environ.get('MATCHING_LOG_LEVEL', 'INFO'),
            'propagate': False,
        },
    },
}
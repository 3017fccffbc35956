from dotenv import load_dotenv
load_dotenv()
import os
import dj_database_url
from pathlib import Path
from datetime import timedelta
import cloudinary
from django.core.exceptions import ImproperlyConfigured

BASE_DIR = Path(__file__).resolve().parent.parent

REQUIRED_ENV_VARS = [
    'DATABASE_URL',
    'SECRET_KEY',
    'CLOUDINARY_URL',
    'AWS_S3_BUCKET',
    'AWS_REGION',
    'AWS_ACCESS_KEY_ID',
    'AWS_SECRET_ACCESS_KEY',
]


def missing_env_vars(names, environ=None):
    environ = os.environ if environ is None else environ
    return [name for name in names if not environ.get(name, '').strip()]


def require_env(names, environ=None):
    missing = missing_env_vars(names, environ)
    if missing:
        raise ImproperlyConfigured(
            "Missing required environment variables: " + ", ".join(missing) +
            ". Set them in the environment or in a .env file next to manage.py."
        )


require_env(REQUIRED_ENV_VARS)

DEBUG = os.getenv('DEBUG', 'False') == 'True'
SECRET_KEY = os.environ['SECRET_KEY']
ALLOWED_HOSTS = os.getenv('ALLOWED_HOSTS', 'localhost,127.0.0.1').split(',')

INSTALLED_APPS = [
    'corsheaders',
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'daphne',
    'django.contrib.staticfiles',
    'rest_framework',
    'rest_framework_simplejwt',
    'rest_framework_simplejwt.token_blacklist',
    'channels',
    'authentication',
    'profiles',
    'contacts',
    'chat',
    'live',
    'feed',
    'committee',
    'academia',
    'gallery',
    'uploads',
    'whitenoise.runserver_nostatic',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',
    'corsheaders.middleware.CorsMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'campus.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

ASGI_APPLICATION = 'campus.asgi.application'

REDIS_URL = os.getenv('REDIS_URL', 'redis://127.0.0.1:6379/0')
CHANNEL_LAYERS = {
    'default': {
        'BACKEND': 'channels_redis.core.RedisChannelLayer',
        'CONFIG': {
            'hosts': [REDIS_URL],
            'capacity': 1500,
            'expiry': 10,
        },
    },
}

CACHES = {
    'default': {
        'BACKEND': 'django_redis.cache.RedisCache',
        'LOCATION': REDIS_URL,
        'OPTIONS': {
            'CLIENT_CLASS': 'django_redis.client.DefaultClient',
        }
    }
}

DATABASES = {
    'default': dj_database_url.parse(os.environ['DATABASE_URL'], conn_max_age=600)
}

AUTH_USER_MODEL = 'authentication.User'

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': (
        'rest_framework_simplejwt.authentication.JWTAuthentication',
    ),
}

SIMPLE_JWT = {
    'ACCESS_TOKEN_LIFETIME': timedelta(hours=12),
    'REFRESH_TOKEN_LIFETIME': timedelta(days=7),
    'ROTATE_REFRESH_TOKENS': True,
    'BLACKLIST_AFTER_ROTATION': True,
}

# Only addresses on this domain may sign up or sign in.
ALLOWED_EMAIL_DOMAIN = os.getenv('ALLOWED_EMAIL_DOMAIN', 'miet.ac.in')

PRESENCE_HEARTBEAT_SECONDS = int(os.getenv('PRESENCE_HEARTBEAT_SECONDS', '30'))
PRESENCE_STALE_SECONDS = int(os.getenv('PRESENCE_STALE_SECONDS', '60'))
if PRESENCE_STALE_SECONDS < PRESENCE_HEARTBEAT_SECONDS:
    raise ImproperlyConfigured(
        f"PRESENCE_STALE_SECONDS ({PRESENCE_STALE_SECONDS}) must be at least "
        f"PRESENCE_HEARTBEAT_SECONDS ({PRESENCE_HEARTBEAT_SECONDS})"
    )

FRIEND_REQUEST_ALLOW_RESEND = os.getenv('FRIEND_REQUEST_ALLOW_RESEND', 'True') == 'True'
DIRECT_MESSAGE_MAX_LENGTH = 4000
DIRECT_MESSAGE_REQUIRES_FRIENDSHIP = os.getenv('DIRECT_MESSAGE_REQUIRES_FRIENDSHIP', 'False') == 'True'
GROUP_CHAT_HISTORY_LIMIT = 50
FEED_REACTIONS = ['iloveu', 'kataiZeher', 'kyaDekhLiya']

AWS_S3_BUCKET = os.environ['AWS_S3_BUCKET']
AWS_REGION = os.environ['AWS_REGION']
AWS_ACCESS_KEY_ID = os.environ['AWS_ACCESS_KEY_ID']
AWS_SECRET_ACCESS_KEY = os.environ['AWS_SECRET_ACCESS_KEY']
PRESIGNED_URL_EXPIRES_SECONDS = 900
MAX_UPLOAD_BYTES = 100 * 1024 * 1024
ALLOWED_UPLOAD_CONTENT_TYPES = [
    'image/jpeg', 'image/png', 'image/gif', 'image/webp',
    'video/mp4', 'video/quicktime', 'video/webm',
    'application/pdf', 'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    'application/vnd.ms-powerpoint',
    'application/vnd.openxmlformats-officedocument.presentationml.presentation',
    'application/zip', 'text/plain',
]

FRONTEND_URL = os.getenv('FRONTEND_URL', 'http://localhost:3000').split(',')
CORS_ALLOW_ALL_ORIGINS = False
CORS_ALLOWED_ORIGINS = FRONTEND_URL
CORS_ALLOW_METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']
CORS_ALLOW_HEADERS = [
    'authorization',
    'content-type',
    'x-csrftoken',
    'accept',
    'origin',
]

AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.UserAttributeSimilarityValidator'},
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator'},
    {'NAME': 'django.contrib.auth.password_validation.CommonPasswordValidator'},
    {'NAME': 'django.contrib.auth.password_validation.NumericPasswordValidator'},
]

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

STATIC_URL = '/static/'
STATIC_ROOT = os.path.join(BASE_DIR, 'staticfiles')

# Reads CLOUDINARY_URL from the environment.
cloudinary.config(secure=True)

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

SECURE_SSL_REDIRECT = False

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
        },
    },
    'loggers': {
        '': {
            'handlers': ['console'],
            'level': 'DEBUG' if DEBUG else 'INFO',
        },
    },
}

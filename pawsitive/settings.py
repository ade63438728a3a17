# pawsitive/settings.py
from pathlib import Path
import os
import urllib.parse

# -----------------------------------------------------------------------------
# Core
# -----------------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent

DEBUG = os.getenv("DJANGO_DEBUG", "False").lower() == "true"
SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "change-me")

# When DEBUG, allow everything. In prod, read comma-separated env.
ALLOWED_HOSTS = ["*"] if DEBUG else [h for h in os.getenv("ALLOWED_HOSTS", "").split(",") if h]

# -----------------------------------------------------------------------------
# Apps / Middleware
# -----------------------------------------------------------------------------
INSTALLED_APPS = [
    # Django
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    # Local
    "registry",
    "adoptions",
    "donations",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "pawsitive.urls"
WSGI_APPLICATION = "pawsitive.wsgi.application"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

# -----------------------------------------------------------------------------
# Database (SQLite by default)
# -----------------------------------------------------------------------------
# Store-level timeout in seconds; a lock wait or connect that exceeds it
# surfaces to callers as a transient error.
DB_TIMEOUT = int(os.getenv("DB_TIMEOUT", "10"))

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": os.getenv("SQLITE_PATH", str(BASE_DIR / "db.sqlite3")),
        "OPTIONS": {"timeout": DB_TIMEOUT},
    }
}

DATABASE_URL = os.getenv("DATABASE_URL", "")
if DATABASE_URL and (DATABASE_URL.startswith("postgres://") or DATABASE_URL.startswith("postgresql://")):
    urllib.parse.uses_netloc.append("postgres")
    url = urllib.parse.urlparse(DATABASE_URL)
    DATABASES["default"] = {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": url.path.lstrip("/"),
        "USER": url.username,
        "PASSWORD": url.password,
        "HOST": url.hostname,
        "PORT": url.port or 5432,
        "CONN_MAX_AGE": 60,
        "OPTIONS": {
            "sslmode": os.getenv("DATABASE_SSLMODE", "disable"),
            "connect_timeout": DB_TIMEOUT,
            "options": f"-c statement_timeout={DB_TIMEOUT * 1000}",
        },
    }

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# -----------------------------------------------------------------------------
# i18n / tz
# -----------------------------------------------------------------------------
LANGUAGE_CODE = "en-us"
# Receipt numbers embed the creation time rendered in this zone.
TIME_ZONE = os.getenv("DJANGO_TIME_ZONE", "UTC")
USE_I18N = True
USE_TZ = True

# -----------------------------------------------------------------------------
# Static files (nginx should serve STATIC_ROOT in prod)
# -----------------------------------------------------------------------------
STATIC_URL = "/static/"
STATIC_ROOT = os.getenv("STATIC_ROOT", str(BASE_DIR / "staticfiles"))

# -----------------------------------------------------------------------------
# Security (reverse proxy + TLS terminated upstream)
# -----------------------------------------------------------------------------
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SESSION_COOKIE_SECURE = not DEBUG
CSRF_COOKIE_SECURE = not DEBUG
SECURE_SSL_REDIRECT = (not DEBUG) and (os.getenv("SECURE_SSL_REDIRECT", "false").lower() == "true")
X_FRAME_OPTIONS = "DENY"

# Include your HTTPS origin for CSRF in prod (comma-separated)
_csrf_origins = [o for o in os.getenv("CSRF_TRUSTED_ORIGINS", "").split(",") if o]
CSRF_TRUSTED_ORIGINS = _csrf_origins if not DEBUG else []

# -----------------------------------------------------------------------------
# Logging (keep it simple; logs to stdout for Docker)
# -----------------------------------------------------------------------------
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "[{levelname}] {name}: {message}", "style": "{"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "root": {"handlers": ["console"], "level": "INFO"},
    "loggers": {
        "django.server": {"handlers": ["console"], "level": "INFO", "propagate": False},
        "pawsitive": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "registry": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "adoptions": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "donations": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}

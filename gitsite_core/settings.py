import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("GITSITE_SECRET_KEY", "django-insecure-git-site")
DEBUG = os.environ.get("GITSITE_DEBUG", "0") == "1"
ALLOWED_HOSTS = os.environ.get("GITSITE_ALLOWED_HOSTS", "*").split(",")

INSTALLED_APPS = [
    "browse_app",
]

MIDDLEWARE = [
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "gitsite_core.urls"
WSGI_APPLICATION = "gitsite_core.wsgi.application"

# read-only site: repositories live on disk, nothing goes to a database
DATABASES = {}

USE_TZ = True

# directory holding one bare repository (with a site.toml) per sub-directory
GIT_ROOT = os.environ.get("GITSITE_GIT_ROOT", "/home/git")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "plain": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "plain"},
    },
    "loggers": {
        "browse_app": {
            "handlers": ["console"],
            "level": os.environ.get("GITSITE_LOG_LEVEL", "INFO"),
        },
    },
}

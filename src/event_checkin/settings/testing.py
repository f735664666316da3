import os

from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

JWT_EXPIRES_HOURS = 1
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin123"

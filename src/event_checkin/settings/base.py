"""Settings shared by every environment, read from the process environment."""
import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "event_checkin"),
}

JWT_EXPIRES_HOURS = int(os.getenv("JWT_EXPIRES_HOURS", "24"))

DEFAULT_EVENT_ID = os.getenv("DEFAULT_EVENT_ID", "default-event")

# Admin account created by POST /setup/create-admin and scripts/create_admin.py
ADMIN_NAME = os.getenv("ADMIN_NAME", "Admin User")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
ADMIN_PHONE = os.getenv("ADMIN_PHONE", "1234567890")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

QR_IMAGE_SIZE = int(os.getenv("QR_IMAGE_SIZE", "256"))
QR_BORDER = int(os.getenv("QR_BORDER", "1"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_TIMEZONE = os.getenv("LOG_TIMEZONE", "UTC")

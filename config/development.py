import os

from .config import build_database_uri

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "rollcall"),
}
DATABASE_URL = build_database_uri(DB_CONFIG)

# Shared password for the attendance desk and for creating coordinators
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

TIMEZONE = os.getenv("TIMEZONE", "Asia/Kolkata")
CALENDAR_START = os.getenv("CALENDAR_START", "2025-08-27")
CALENDAR_END = os.getenv("CALENDAR_END", "2025-12-21")
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE") or None

DEBUG = True

# Create tables on startup (idempotent: create_all skips existing tables)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

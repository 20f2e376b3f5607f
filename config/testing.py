SECRET_KEY = "test-secret"

DATABASE_URL = "sqlite://"

ADMIN_PASSWORD = "test-admin"

TIMEZONE = "Asia/Kolkata"
CALENDAR_START = "2025-08-27"
CALENDAR_END = "2025-12-21"
MAX_UPLOAD_MB = 2

LOG_LEVEL = "WARNING"
LOG_FILE = None

DEBUG = False
TESTING = True

AUTO_INIT_DB = True

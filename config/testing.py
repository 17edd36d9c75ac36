import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "rfid_attendance_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

LATE_GRACE_MINUTES = 15
ALLOW_UNATTRIBUTED_SCANS = False

SCHEDULE_PARSER_URL = ""
SCHEDULE_PARSER_API_KEY = ""
SCHEDULE_PARSER_TIMEOUT = 5.0

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
ADMIN_EMAIL = ""
ADMIN_PASSWORD = ""

import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "rfid_attendance"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Minutes after a period starts before a scan counts as Late.
LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "15"))
ALLOW_UNATTRIBUTED_SCANS = bool(int(os.getenv("ALLOW_UNATTRIBUTED_SCANS", "0")))

# Hosted schedule-image parser; leave empty to disable image import.
SCHEDULE_PARSER_URL = os.getenv("SCHEDULE_PARSER_URL", "")
SCHEDULE_PARSER_API_KEY = os.getenv("SCHEDULE_PARSER_API_KEY", "")
SCHEDULE_PARSER_TIMEOUT = float(os.getenv("SCHEDULE_PARSER_TIMEOUT", "60"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data and the admin account on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@campus.local")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "rfid_attendance"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "15"))
ALLOW_UNATTRIBUTED_SCANS = bool(int(os.getenv("ALLOW_UNATTRIBUTED_SCANS", "0")))

SCHEDULE_PARSER_URL = os.getenv("SCHEDULE_PARSER_URL", "")
SCHEDULE_PARSER_API_KEY = os.getenv("SCHEDULE_PARSER_API_KEY", "")
SCHEDULE_PARSER_TIMEOUT = float(os.getenv("SCHEDULE_PARSER_TIMEOUT", "60"))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "store_attendance_test"),
}

AI_API_KEY = "test-key"
AI_BASE_URL = "http://localhost:9/v1/"
AI_VISION_MODEL = "gemini-2.5-flash"
AI_TIMEOUT_SECONDS = 5.0

EVIDENCE_DIR = os.getenv("EVIDENCE_DIR", "uploads/test-evidence")
EVIDENCE_PUBLIC_URL = "http://localhost/evidence"

AVATAR_HOSTS = ("ui-avatars.com",)

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

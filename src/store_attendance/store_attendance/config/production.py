import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", ""),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "store_attendance"),
}

AI_API_KEY = os.getenv("AI_API_KEY", "")
AI_BASE_URL = os.getenv("AI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai/")
AI_VISION_MODEL = os.getenv("AI_VISION_MODEL", "gemini-2.5-flash")
AI_TIMEOUT_SECONDS = float(os.getenv("AI_TIMEOUT_SECONDS", "30"))

EVIDENCE_DIR = os.getenv("EVIDENCE_DIR", "/var/lib/store-attendance/evidence")
EVIDENCE_PUBLIC_URL = os.getenv("EVIDENCE_PUBLIC_URL", "/evidence")

AVATAR_HOSTS = tuple(h.strip() for h in os.getenv("AVATAR_HOSTS", "ui-avatars.com").split(",") if h.strip())

DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

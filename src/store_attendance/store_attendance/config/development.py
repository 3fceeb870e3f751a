import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", "change-me"),
    "database": os.getenv("DB_NAME", "store_attendance"),
}

# Vision model (OpenAI-compatible endpoint)
AI_API_KEY = os.getenv("AI_API_KEY", "")
AI_BASE_URL = os.getenv("AI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai/")
AI_VISION_MODEL = os.getenv("AI_VISION_MODEL", "gemini-2.5-flash")
AI_TIMEOUT_SECONDS = float(os.getenv("AI_TIMEOUT_SECONDS", "30"))

# Evidence photos
EVIDENCE_DIR = os.getenv("EVIDENCE_DIR", "uploads/evidence")
EVIDENCE_PUBLIC_URL = os.getenv("EVIDENCE_PUBLIC_URL", "http://localhost:5000/evidence")

# Hosts serving generated avatars rather than real photographs
AVATAR_HOSTS = tuple(h.strip() for h in os.getenv("AVATAR_HOSTS", "ui-avatars.com").split(",") if h.strip())

DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo stores and users on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))

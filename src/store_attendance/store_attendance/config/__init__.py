import os


def get_settings_module() -> str:
    # APP_ENV selects the settings module; anything unknown falls back to development.
    env = os.getenv("APP_ENV", "dev").lower()

    if env in {"prod", "production"}:
        return "store_attendance.config.production"

    if env in {"test", "testing"}:
        return "store_attendance.config.testing"

    return "store_attendance.config.development"

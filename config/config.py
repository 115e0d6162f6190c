"""Settings shared by every environment, read from the process environment."""

import os


def env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def db_config_from_env(default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "presence_db"),
    }


# "H:M" local time after which leaving the home room counts as going home
STUDENT_DAILY_CHECKOUT_TIME = os.getenv("STUDENT_DAILY_CHECKOUT_TIME", "15:00")

# Ask "Gehst du nach Hause?" before a daily checkout instead of checking out directly
DAILY_CHECKOUT_CONFIRMATION = env_flag("DAILY_CHECKOUT_CONFIRMATION", "1")

DEVICE_ONLINE_MINUTES = int(os.getenv("DEVICE_ONLINE_MINUTES", "5"))

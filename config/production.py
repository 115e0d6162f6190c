import os

from config.config import (
    DAILY_CHECKOUT_CONFIRMATION,
    DEVICE_ONLINE_MINUTES,
    STUDENT_DAILY_CHECKOUT_TIME,
    db_config_from_env,
    env_flag,
)

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config_from_env()

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")

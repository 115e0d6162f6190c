import os

from config.config import DEVICE_ONLINE_MINUTES, db_config_from_env

SECRET_KEY = "test-secret"

DB_CONFIG = db_config_from_env()

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = False

STUDENT_DAILY_CHECKOUT_TIME = "15:00"
DAILY_CHECKOUT_CONFIRMATION = True

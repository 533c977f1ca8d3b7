import os

from config.config import Config

SECRET_KEY = "test-secret"

DB_CONFIG = {
    **Config.db_config(),
    "database": os.getenv("DB_NAME", "participation_test_db"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
DAYCODE_LENGTH = Config.DAYCODE_LENGTH

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

import os
from dotenv import load_dotenv

load_dotenv(dotenv_path=".env")

# Definition store
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./sequence_timer.db")

# Connection pool configuration (ignored for SQLite)
POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))
MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "10"))
POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", "30"))
POOL_RECYCLE = int(os.getenv("DB_POOL_RECYCLE", "3600"))

# Playback
TICK_INTERVAL_SECONDS = float(os.getenv("TICK_INTERVAL_SECONDS", "1.0"))

# Expo push tokens that receive completion notifications (comma separated)
EXPO_PUSH_TOKENS = [
    token.strip()
    for token in os.getenv("EXPO_PUSH_TOKENS", "").split(",")
    if token.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

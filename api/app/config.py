import os
from pathlib import Path

APP_NAME = os.getenv("APP_NAME", "Campus Swipe API")
DEV_MODE = os.getenv("DEV_MODE", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

JWT_SECRET = os.getenv("JWT_SECRET", "")
SESSION_TTL_HOURS = int(os.getenv("SESSION_TTL_HOURS", "24"))
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "token")
USER_ID_COOKIE_NAME = os.getenv("USER_ID_COOKIE_NAME", "user_id")
COOKIE_SECURE = os.getenv("COOKIE_SECURE", "false").lower() == "true"

FEED_BATCH_SIZE = int(os.getenv("FEED_BATCH_SIZE", "20"))
MESSAGE_MAX_LENGTH = int(os.getenv("MESSAGE_MAX_LENGTH", "2000"))

_default_uploads = Path(__file__).resolve().parents[1] / "uploads"
UPLOADS_DIR = Path(os.getenv("UPLOADS_DIR", str(_default_uploads)))
UPLOAD_TOKEN_TTL_MINUTES = int(os.getenv("UPLOAD_TOKEN_TTL_MINUTES", "10"))
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(8 * 1024 * 1024)))
ALLOWED_UPLOAD_CONTENT_TYPES = ["image/jpeg", "image/png", "image/webp", "image/gif"]

ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "ALLOWED_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000",
    ).split(",")
    if origin.strip()
]

DB_WAIT_ATTEMPTS = int(os.getenv("DB_WAIT_ATTEMPTS", "20"))
DB_WAIT_DELAY_SECONDS = float(os.getenv("DB_WAIT_DELAY_SECONDS", "1.5"))

# helpmate/config.py
import os
import logging
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEV_JWT_SECRET = "helpmate-dev-secret"

# Database
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
MONGODB_DB = os.getenv("MONGODB_DB", "helpmate")

# JWT settings
JWT_SECRET = os.getenv("JWT_SECRET") or DEV_JWT_SECRET
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
# 7 days
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24 * 7))

# Attachments
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
MAX_ATTACHMENT_BYTES = int(os.getenv("MAX_ATTACHMENT_BYTES", 10 * 1024 * 1024))

CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "false").lower() in ("1", "true", "yes")


def warn_on_dev_secret():
    if JWT_SECRET == DEV_JWT_SECRET:
        logger.warning("JWT_SECRET is not set, using the development secret")

import os

# Database configuration
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./badgemint.db")

# Redis configuration
REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")

# Identities with registry-wide privileges
REGISTRY_OWNER = os.getenv("REGISTRY_OWNER", "").strip().lower()
BADGE_ISSUER = os.getenv("BADGE_ISSUER", "badgemint-issuer").strip().lower()

# Claim lock (seconds)
CLAIM_LOCK_TIMEOUT = int(os.getenv("CLAIM_LOCK_TIMEOUT", "10"))
CLAIM_LOCK_BLOCKING_TIMEOUT = int(os.getenv("CLAIM_LOCK_BLOCKING_TIMEOUT", "5"))

MAX_BATCH_SIZE = int(os.getenv("MAX_BATCH_SIZE", "100"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def get_redis_url():
    return REDIS_URL


def get_database_url():
    return DATABASE_URL

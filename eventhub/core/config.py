# eventhub/core/config.py
import os
import warnings

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./eventhub.db")

# Auth
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    warnings.warn("SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2)
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only
ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(7 * 24 * 60)))

FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

# Broadcast requests
BROADCAST_TTL_DAYS = int(os.getenv("BROADCAST_TTL_DAYS", "7"))
# expired records are kept this long before the reaper deletes them
BROADCAST_RETENTION_DAYS = int(os.getenv("BROADCAST_RETENTION_DAYS", "30"))
# 0 disables the background reaper
BROADCAST_REAPER_INTERVAL_SECONDS = int(os.getenv("BROADCAST_REAPER_INTERVAL_SECONDS", "300"))

# "matching" books only the slot containing the booking time,
# "whole_day" books every slot of the day (legacy data)
SLOT_OCCUPANCY_MODE = os.getenv("SLOT_OCCUPANCY_MODE", "matching").lower()
if SLOT_OCCUPANCY_MODE not in ("matching", "whole_day"):
    raise ValueError(f"Invalid SLOT_OCCUPANCY_MODE: {SLOT_OCCUPANCY_MODE!r}")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))

"""Configuration and environment variables."""

import os

from uslex.settings import DB_PATH

# Provision database, opened read-only per request
DATABASE_PATH = os.getenv("USLEX_DB_PATH", DB_PATH)

# CORS configuration
CORS_ORIGINS = [
    origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
]

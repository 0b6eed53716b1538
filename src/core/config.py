"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(os.environ.get("DB_PATH", PROJECT_ROOT / "data" / "db" / "dashboard.db"))
OUTPUT_DIR = PROJECT_ROOT / "output"

# Relative paths resolve against the working directory of the running process
TEMPLATES_DIR = Path(os.environ.get("TEMPLATES_DIR", "Templates"))
TEMPLATE_FILE_NAME = "rapportino_alfa.xlsx"

# =============================================================================
# JWT CONFIGURATION
# =============================================================================

JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "")
JWT_ISSUER = os.environ.get("JWT_ISSUER", "")
JWT_AUDIENCE = os.environ.get("JWT_AUDIENCE", "")
JWT_COOKIE_NAME = os.environ.get("JWT_COOKIE_NAME", "jwt")
JWT_ALGORITHM = "HS256"
TOKEN_EXPIRATION_HOURS = 1
COOKIE_EXPIRATION_HOURS = 5

# =============================================================================
# DEFAULT USER (seeded at startup)
# =============================================================================

DEFAULT_USER_FIRST_NAME = os.environ.get("DEFAULT_USER_FIRST_NAME", "Admin")
DEFAULT_USER_LAST_NAME = os.environ.get("DEFAULT_USER_LAST_NAME", "")
DEFAULT_USER_USERNAME = os.environ.get("DEFAULT_USER_USERNAME", "admin")
DEFAULT_USER_EMAIL = os.environ.get("DEFAULT_USER_EMAIL", "")
DEFAULT_USER_PASSWORD = os.environ.get("DEFAULT_USER_PASSWORD", "")

# =============================================================================
# API CONFIGURATION
# =============================================================================

API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("API_PORT", "8000"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_ENVIRONMENT = os.environ.get("API_ENVIRONMENT", "production")
IS_DEVELOPMENT = API_ENVIRONMENT.lower() == "development"
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "CORS_ORIGINS", "http://localhost:3000,http://localhost:5173"
    ).split(",")
    if origin.strip()
]
MAX_UPLOAD_SIZE_MB = int(os.environ.get("MAX_UPLOAD_SIZE_MB", "20"))
MAX_UPLOAD_SIZE_BYTES = MAX_UPLOAD_SIZE_MB * 1024 * 1024
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
API_VERSION = "1.0.0"

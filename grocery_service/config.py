import os

# Database connection string. Falls back to a local SQLite file for development.
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./grocery.db")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Hardcoded admin login, overridable per deployment.
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

UPLOAD_DIR = os.getenv("UPLOAD_DIR", "./uploads")
UPLOAD_URL_PREFIX = os.getenv("UPLOAD_URL_PREFIX", "/uploads")
MAX_UPLOAD_BYTES = 5 * 1024 * 1024

CORS_ALLOW_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
    if origin.strip()
]

# Integration credentials used when the settings row has none.
STEADFAST_API_KEY = os.getenv("STEADFAST_API_KEY", "")
STEADFAST_SECRET_KEY = os.getenv("STEADFAST_SECRET_KEY", "")
FRAUD_CHECK_API_KEY = os.getenv("FRAUD_CHECK_API_KEY", "")
WHATSAPP_API_KEY = os.getenv("WHATSAPP_API_KEY", "")
WHATSAPP_API_URL = os.getenv("WHATSAPP_API_URL", "")
WHATSAPP_PHONE_NUMBER_ID = os.getenv("WHATSAPP_PHONE_NUMBER_ID", "")

PORT = int(os.getenv("PORT", 8000))

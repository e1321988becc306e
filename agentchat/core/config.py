# agentchat/core/config.py
import os
import secrets

from dotenv import load_dotenv

load_dotenv()


def _get_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./agentchat.db")

# Identity
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", secrets.token_urlsafe(32))
JWT_ALGORITHM = "HS256"
JWT_ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("JWT_ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24)))

# Bootstrap admin, created on startup when both are set
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

# Language model (any OpenAI-compatible endpoint)
LLM_API_KEY = os.getenv("LLM_API_KEY") or os.getenv("GEMINI_API_KEY", "")
LLM_BASE_URL = os.getenv("LLM_BASE_URL", "https://generativelanguage.googleapis.com/v1beta/openai/")
LLM_MODEL = os.getenv("LLM_MODEL", "gemini-1.5-flash")
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))
LLM_TEMPERATURE = 0.7
LLM_MAX_TOKENS = 1000
LLM_TOP_P = 0.8

# Seconds a resolved role is trusted before the profile is read again
ROLE_CACHE_TTL_SECONDS = float(os.getenv("ROLE_CACHE_TTL_SECONDS", "30"))

# Unset means a disabled agent can still be reached through a stale conversation link
ENFORCE_AGENT_ENABLED = _get_bool("ENFORCE_AGENT_ENABLED")

# Storage
STORAGE_DIR = os.getenv("STORAGE_DIR", "uploads/storage")
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/")
PUBLIC_STORAGE_PATH = "/storage/v1/object/public"
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("LOG_DIR", "logs")

# Branding defaults served when the settings table has no value for a key
DEFAULT_SETTINGS = {
    "app_logo_url": "https://i.ibb.co/GzB7Wg5/aiw-logo.png",
    "brand_color": "#1043FA",
    "app_name": "AI Agent Chat",
}

SETTING_DESCRIPTIONS = {
    "app_logo_url": "Public URL of the application logo",
    "brand_color": "Primary brand color as #RRGGBB",
    "app_name": "Application name shown in the header",
}

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, GET, OPTIONS, PUT, DELETE, PATCH",
    "Access-Control-Max-Age": "86400",
    "Access-Control-Allow-Credentials": "false",
}

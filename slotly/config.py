import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./slotly.db")

# Hosted auth provider (GoTrue-compatible REST API)
AUTH_URL = os.getenv("AUTH_URL", "http://localhost:54321").rstrip("/")
AUTH_ANON_KEY = os.getenv("AUTH_ANON_KEY", "")
AUTH_TIMEOUT_SECONDS = float(os.getenv("AUTH_TIMEOUT_SECONDS", "10"))

# Session cookie written by /auth/callback and read by the gateway
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "sb-auth-token")
# Any cookie whose name contains one of these markers counts as a session
SESSION_COOKIE_MARKERS = tuple(
    m.strip() for m in os.getenv("SESSION_COOKIE_MARKERS", "auth-token,sb-").split(",") if m.strip()
)
CODE_VERIFIER_COOKIE_NAME = os.getenv(
    "CODE_VERIFIER_COOKIE_NAME", f"{SESSION_COOKIE_NAME}-code-verifier"
)
COOKIE_SECURE = os.getenv("COOKIE_SECURE", "true").lower() == "true"

# Navigation targets
SIGN_IN_URL = os.getenv("SIGN_IN_URL", "/auth/sign-in")
DASHBOARD_PATH = os.getenv("DASHBOARD_PATH", "/dashboard")

# Frontend base URL for CORS and CSP
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    f"{FRONTEND_URL},http://localhost:5173",
).split(",")

# Security toggles. Only disable these for local development and tests.
CSRF_ENABLED = os.getenv("CSRF_ENABLED", "true").lower() == "true"
SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"

# Requests per minute, per client IP
PUBLIC_PAGE_RATE_LIMIT = int(os.getenv("PUBLIC_PAGE_RATE_LIMIT", "120"))
AUTH_CALLBACK_RATE_LIMIT = int(os.getenv("AUTH_CALLBACK_RATE_LIMIT", "20"))

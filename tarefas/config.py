from pathlib import Path
import os

from dotenv import load_dotenv

# Load environment variables from repo root and package .env (if present).
REPO_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(REPO_ROOT / ".env")
load_dotenv(Path(__file__).resolve().parent / ".env")

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./tarefas.db")
SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
SESSION_EXPIRE_MINUTES = int(os.getenv("SESSION_EXPIRE_MINUTES", str(30 * 24 * 60)))

# Base URL the site is reachable at; used for share links and the OAuth callback.
PUBLIC_URL = os.getenv("PUBLIC_URL", "").rstrip("/")

GOOGLE_CLIENT_ID = os.getenv("GOOGLE_CLIENT_ID", "")
GOOGLE_CLIENT_SECRET = os.getenv("GOOGLE_CLIENT_SECRET", "")

LANDING_REVALIDATE_SECONDS = int(os.getenv("LANDING_REVALIDATE_SECONDS", "3600"))
DISPLAY_LOCALE = os.getenv("DISPLAY_LOCALE", "en_US")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

_cors_origins = os.getenv("CORS_ORIGINS", "http://localhost:8000")
CORS_ORIGINS = [origin.strip() for origin in _cors_origins.split(",") if origin.strip()]

"""Centralized configuration for the shop backend."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple
from dotenv import load_dotenv

from errors import ConfigError

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent

# ==================== Defaults ====================
DEFAULT_PORT = 3001
DEFAULT_REDIS_URL = "redis://localhost:6379/0"
DEFAULT_OPENAI_MODEL = "gpt-4"
DEFAULT_IMAGE = "/uploads/default.jpeg"
DEFAULT_ALLOWED_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://www.airstride.co.za",
    "http://www.airstride.co.za.s3-website-us-east-1.amazonaws.com",
    "http://98.89.166.198",
)

# Only ever used when INSECURE_DEV_MODE is switched on
INSECURE_DEV_SECRET = "insecure-dev-secret-change-me"


def _as_bool(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes"}


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, read once at startup."""
    jwt_secret_key: str
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    debug: bool = False
    redis_url: str = DEFAULT_REDIS_URL
    jwt_access_token_expires: int = 3600
    insecure_dev_mode: bool = False
    openai_api_key: Optional[str] = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    upload_dir: Path = PROJECT_ROOT / "uploads"
    allowed_origins: Tuple[str, ...] = DEFAULT_ALLOWED_ORIGINS
    default_image: str = DEFAULT_IMAGE


def load_settings(environ=None) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        environ: Mapping to read from (default: os.environ)

    Raises:
        ConfigError: JWT_SECRET_KEY is unset and INSECURE_DEV_MODE is off
    """
    env = os.environ if environ is None else environ

    insecure_dev_mode = _as_bool(env.get("INSECURE_DEV_MODE"))
    jwt_secret_key = (env.get("JWT_SECRET_KEY") or "").strip()
    if not jwt_secret_key:
        if not insecure_dev_mode:
            raise ConfigError("JWT_SECRET_KEY is not set. Set it, or set INSECURE_DEV_MODE=true for local development.")
        logger.warning("JWT_SECRET_KEY not set. Using insecure development secret (not for production!)")
        jwt_secret_key = INSECURE_DEV_SECRET

    openai_api_key = (env.get("OPENAI_API_KEY") or "").strip() or None
    if not openai_api_key:
        logger.warning("OPENAI_API_KEY not set. /api/ai/ask will be unavailable.")

    origins = env.get("ALLOWED_ORIGINS")
    if origins:
        allowed_origins = tuple(o.strip() for o in origins.split(",") if o.strip())
    else:
        allowed_origins = DEFAULT_ALLOWED_ORIGINS

    upload_dir = env.get("UPLOAD_DIR")

    return Settings(
        jwt_secret_key=jwt_secret_key,
        host=env.get("FLASK_HOST", "0.0.0.0"),
        port=int(env.get("PORT", str(DEFAULT_PORT))),
        debug=_as_bool(env.get("FLASK_DEBUG")),
        redis_url=env.get("REDIS_URL", DEFAULT_REDIS_URL),
        jwt_access_token_expires=int(env.get("JWT_ACCESS_TOKEN_EXPIRES", "3600")),
        insecure_dev_mode=insecure_dev_mode,
        openai_api_key=openai_api_key,
        openai_model=env.get("OPENAI_MODEL", DEFAULT_OPENAI_MODEL),
        upload_dir=Path(upload_dir) if upload_dir else PROJECT_ROOT / "uploads",
        allowed_origins=allowed_origins,
    )


__all__ = ['Settings', 'load_settings', 'DEFAULT_IMAGE', 'DEFAULT_ALLOWED_ORIGINS']

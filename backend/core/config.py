# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261018v1
# ---------------------------------------------------------------------------
"""
Application configuration.
Everything is loaded from environment variables (or etc/app.conf).  The
server never holds key material, so nothing here is a secret except
possibly the database credentials inside ``database_url``.
"""

from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings

# Project root is two levels up from this file  (backend/core/config.py → sealnote/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    # Database – any SQLAlchemy URL; defaults to a SQLite file in the project root
    database_url: str = f"sqlite:///{_PROJECT_ROOT / 'sealnote.db'}"

    # CORS origins allowed to call the API.  ["*"] allows every origin.
    allow_origins: List[str] = ["*"]

    # Origin placed in front of the id in the submit response ``url``.
    # Empty means "the origin the request came in on".
    public_base_url: str = ""

    # Record identifiers: 12 base64url chars ≈ 72 bits of entropy
    id_length: int = 12

    # Upper bound for a submitted TTL (30 days)
    max_ttl_seconds: int = 2_592_000

    # Background sweep of expired rows; 0 disables it (reads still enforce expiry)
    sweep_interval_seconds: int = 3600

    # Default API location used by the command-line client
    api_url: str = "http://localhost:8000"

    model_config = {"env_file": str(_PROJECT_ROOT / "etc" / "app.conf")}


# Module-level singleton – import this everywhere: from core.config import settings
settings = Settings()

from __future__ import annotations

import os
from pathlib import Path
from typing import List


class Settings:
    """Centralized configuration for the Life OS service."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        data_root_default = base_dir.parent / "data"

        self.data_root: Path = Path(
            os.environ.get("LIFEOS_DATA_ROOT") or data_root_default
        ).expanduser()
        self.app_db_path: Path = Path(
            os.environ.get("LIFEOS_DB_PATH") or (self.data_root / "lifeos.db")
        ).expanduser()
        # In production you MUST set LIFEOS_JWT_SECRET. The dev secret keeps local
        # demos easy but is not safe for public deployments.
        self.jwt_secret: str = os.environ.get("LIFEOS_JWT_SECRET") or "dev-secret-change-me"
        self.token_ttl_days: int = int(os.environ.get("LIFEOS_TOKEN_TTL_DAYS") or "7")
        self.cookie_secure: bool = (os.environ.get("LIFEOS_COOKIE_SECURE") or "").strip() in {"1", "true", "True"}

        self.default_timezone: str = os.environ.get("LIFEOS_DEFAULT_TIMEZONE") or "UTC"
        self.max_mits_per_day: int = int(os.environ.get("LIFEOS_MAX_MITS_PER_DAY") or "3")
        self.log_level: str = (os.environ.get("LIFEOS_LOG_LEVEL") or "INFO").upper()
        self.api_base_url: str = os.environ.get(
            "LIFEOS_API_BASE_URL", "http://127.0.0.1:8000"
        )

        cors = os.environ.get("LIFEOS_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]


settings = Settings()

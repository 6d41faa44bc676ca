from __future__ import annotations

import os
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Life Strings API"
    debug: bool = False
    log_level: str = "INFO"

    # Feedback log + analytics snapshot live here
    data_dir: Path = Path(os.path.expanduser("~/.life-strings/data"))

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: list[str] = ["http://localhost:3000"]

    # Bearer token for /api/feedback/all and /api/export/*; empty = locked
    admin_token: str = ""

    # Request body limit (bytes)
    max_body_size: int = 10 * 1024 * 1024  # 10MB

    model_config = {"env_prefix": "LIFE_STRINGS_"}


settings = Settings()

"""
Process-wide configuration.

Values are read once from the environment (and a local .env file) and handed
to the application context. Services never read the environment themselves.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

# Load .env only once here
load_dotenv()

DEFAULT_JWT_SECRET = "your-secret-key-change-in-production"
DEFAULT_DATABASE_URL = (
    "host=localhost port=5432 user=postgres password=postgres "
    "dbname=protest_tracker sslmode=disable"
)
MAX_UPLOAD_BYTES = 10 << 20  # 10MB


@dataclass(frozen=True)
class Config:
    port: int = 8080
    database_url: str = DEFAULT_DATABASE_URL
    jwt_secret: str = DEFAULT_JWT_SECRET
    media_dir: str = "./media"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    password_time_cost: int = 3
    max_upload_bytes: int = MAX_UPLOAD_BYTES
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        """
        Build the configuration from environment variables.

        Returns:
            Config: A frozen config object with defaults filled in.
        """
        jwt_secret = os.getenv("JWT_SECRET") or DEFAULT_JWT_SECRET
        if jwt_secret == DEFAULT_JWT_SECRET:
            logging.warning("JWT_SECRET is not set; using the development default.")

        origins = os.getenv("CORS_ORIGINS", "*")

        return cls(
            port=int(os.getenv("PORT", 8080)),
            database_url=os.getenv("DATABASE_URL") or DEFAULT_DATABASE_URL,
            jwt_secret=jwt_secret,
            media_dir=os.getenv("MEDIA_DIR") or "./media",
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            password_time_cost=int(os.getenv("PASSWORD_TIME_COST", 3)),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", MAX_UPLOAD_BYTES)),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

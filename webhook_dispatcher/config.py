import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file

DEFAULT_DATABASE_URL = "sqlite:///./webhooks.db"


@dataclass
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    delivery_timeout: float = 5.0  # seconds per delivery attempt
    dispatch_max_workers: int = 1  # 1 = sequential fan-out
    log_limit_default: int = 100
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000


def get_settings() -> Settings:
    """Build settings from the environment."""
    return Settings(
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        delivery_timeout=float(os.getenv("DELIVERY_TIMEOUT", "5.0")),
        dispatch_max_workers=max(1, int(os.getenv("DISPATCH_MAX_WORKERS", "1"))),
        log_limit_default=int(os.getenv("LOG_LIMIT_DEFAULT", "100")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )

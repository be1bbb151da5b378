import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    database_url: str = os.getenv(
        "DATABASE_URL",
        "sqlite+pysqlite:///./commerce.db",
    )
    db_pool_size: int = int(os.getenv("DB_POOL_SIZE", "15"))
    db_max_overflow: int = int(os.getenv("DB_MAX_OVERFLOW", "20"))
    db_pool_timeout: int = int(os.getenv("DB_POOL_TIMEOUT", "30"))
    db_pool_recycle: int = int(os.getenv("DB_POOL_RECYCLE", "1800"))

    # Naive dates in query params are read in this zone, then compared in UTC
    timezone: str = os.getenv("COMMERCE_TIMEZONE", "UTC")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_json: bool = os.getenv("LOG_JSON", "true").lower() in {"1", "true", "yes", "on"}

    # Order listing
    order_list_max_limit: int = int(os.getenv("ORDER_LIST_MAX_LIMIT", "200"))


settings = Settings()

# storefront/core/config.py
import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings:
    # --- API Info ---
    API_TITLE: str = "Storefront API"
    API_DESCRIPTION: str = "Demo storefront: product catalogue, cart, checkout, order history and authentication."
    API_VERSION: str = "1.0.0"
    API_PREFIX: str = os.getenv("API_PREFIX", "/api")

    # --- Server Configuration ---
    PORT: int = int(os.getenv("PORT", "8000"))
    HOST: str = os.getenv("HOST", "0.0.0.0")
    CORS_ORIGINS: List[str] = _csv(os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"))

    # --- Storage ---
    # Empty URL means an in-memory SQLite database living as long as the process
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    SEED_DATA: bool = os.getenv("SEED_DATA", "1") == "1"

    # --- Tokens ---
    JWT_SECRET: str = os.getenv("JWT_SECRET") or "dev-secret-change-me"
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

    # --- Catalogue ---
    DEFAULT_PAGE_SIZE: int = 12
    MAX_PAGE_SIZE: int = 100
    FEATURED_LIMIT: int = 4
    MAX_LINE_QUANTITY: int = int(os.getenv("MAX_LINE_QUANTITY", "1000"))

    # --- Logging ---
    LOG_CONFIG: str = os.getenv("LOG_CONFIG", "logging.conf")


settings = Settings()

"""Application settings and environment variables."""

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file


class Settings:
    DB_HOST: str = os.getenv("DB_HOST", "localhost")
    DB_PORT: int = int(os.getenv("DB_PORT", "3306"))
    DB_DATABASE: str = os.getenv("DB_NAME", "sales_management_db")
    DB_USER: str = os.getenv("DB_USER", "user")
    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "password")

    # Optional prefix shared by the products, customers and sales tables
    TABLE_PREFIX: str = os.getenv("TABLE_PREFIX", "")

    # Used to resolve "today" when a sale is recorded without a date
    TIMEZONE: str = os.getenv("TIMEZONE", "Europe/Berlin")

    # Logging settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")  # INFO, DEBUG, WARNING, ERROR, CRITICAL
    LOG_FILE: Optional[str] = os.getenv("LOG_FILE")


settings = Settings()

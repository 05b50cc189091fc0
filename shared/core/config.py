import os
from typing import List
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Always load .env from root
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
load_dotenv(os.path.join(BASE_DIR, ".env"))


class Settings(BaseSettings):
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL", f"sqlite:///{os.path.join(BASE_DIR, 'estate.db')}")

    JWT_SECRET: str = os.getenv("JWT_SECRET", "change-me")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRE_MINUTES: int = int(
        os.getenv("JWT_EXPIRE_MINUTES", 1440))  # 24 hours default

    # Seeded on startup when both are present
    SUPER_ADMIN_USERNAME: str | None = os.getenv("SUPER_ADMIN_USERNAME")
    SUPER_ADMIN_PASSWORD: str | None = os.getenv("SUPER_ADMIN_PASSWORD")

    # Ledger / dashboard tuning
    EXPIRING_SOON_DAYS: int = int(os.getenv("EXPIRING_SOON_DAYS", 30))
    TOP_DEBTORS_LIMIT: int = int(os.getenv("TOP_DEBTORS_LIMIT", 5))
    TREND_MONTHS: int = int(os.getenv("TREND_MONTHS", 6))

    # Currency display
    BASE_CURRENCY: str = os.getenv("BASE_CURRENCY", "BDT")
    DEFAULT_EXCHANGE_RATE: str = os.getenv("DEFAULT_EXCHANGE_RATE", "1")

    CORS_ORIGINS: List[str] = ["http://localhost:5173",
                               "http://127.0.0.1:5173"]
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()

ESTATE_DATABASE_URL = settings.DATABASE_URL

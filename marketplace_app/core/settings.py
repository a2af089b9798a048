import os
from typing import List, Literal

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    PROJECT_NAME: str = "REAL ESTATE MARKETPLACE CORE"
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL", "sqlite+aiosqlite:///./marketplace.db"
    )
    DB_ECHO: bool = False
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "change-me")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    LOG_LEVEL: str = "INFO"

    SUPER_ADMIN_ROLE: str = "SUPER_ADMIN"
    # "user" keeps overlap checks per (requester, property); "property" blocks
    # any overlapping booking on the property regardless of requester.
    BOOKING_OVERLAP_SCOPE: Literal["user", "property"] = "user"
    STRICT_STATUS_TRANSITIONS: bool = True

    ALLOWED_HOSTS_RAW: str = os.getenv("ALLOWED_HOSTS", "")

    @property
    def ALLOWED_HOSTS(self) -> List[str]:
        return [
            host.strip() for host in self.ALLOWED_HOSTS_RAW.split(",") if host.strip()
        ]

    class Config:
        env_file = ".env"
        extra = "ignore"
        case_sensitive = False


settings = Settings()

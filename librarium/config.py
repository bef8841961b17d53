import os
from decimal import Decimal
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config(BaseModel):
    """Налаштування сервісу, зчитуються один раз з оточення."""

    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "password"
    DB_NAME: str = "task_management"
    DATABASE_URL_OVERRIDE: Optional[str] = None
    DB_ECHO: bool = False
    DB_SSL: bool = False

    ALLOWED_ORIGINS: str = "*"
    SEED_SAMPLE_DATA: bool = True

    LOAN_PERIOD_DAYS: int = 14
    MAX_RENEWALS: int = 3
    RESERVATION_HOLD_DAYS: int = 7
    LATE_FEE_PER_DAY: Decimal = Decimal("0.50")

    CELERY_BROKER_URL: str = "redis://localhost:6379/0"
    LOG_LEVEL: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        return cls(
            DB_HOST=os.getenv("DB_HOST", "localhost"),
            DB_PORT=int(os.getenv("DB_PORT", "5432")),
            DB_USER=os.getenv("DB_USER", "postgres"),
            DB_PASSWORD=os.getenv("DB_PASSWORD", "password"),
            DB_NAME=os.getenv("DB_NAME", "task_management"),
            DATABASE_URL_OVERRIDE=os.getenv("DATABASE_URL"),
            DB_ECHO=_env_flag("DB_ECHO", "false"),
            DB_SSL=_env_flag("DB_SSL", "false"),
            ALLOWED_ORIGINS=os.getenv("ALLOWED_ORIGINS", "*"),
            SEED_SAMPLE_DATA=_env_flag("SEED_SAMPLE_DATA", "true"),
            LOAN_PERIOD_DAYS=int(os.getenv("LOAN_PERIOD_DAYS", "14")),
            MAX_RENEWALS=int(os.getenv("MAX_RENEWALS", "3")),
            RESERVATION_HOLD_DAYS=int(os.getenv("RESERVATION_HOLD_DAYS", "7")),
            LATE_FEE_PER_DAY=Decimal(os.getenv("LATE_FEE_PER_DAY", "0.50")),
            CELERY_BROKER_URL=os.getenv(
                "CELERY_BROKER_URL",
                "redis://localhost:6379/0",
            ),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    @property
    def DATABASE_URL(self) -> str:
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return (
            f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def allowed_origins(self) -> List[str]:
        return [
            origin.strip()
            for origin in self.ALLOWED_ORIGINS.split(",")
            if origin.strip()
        ]


config = Config.from_env()


class LogConfig(BaseModel):
    """Logging configuration passed to dictConfig."""

    LOGGER_NAME: str = "librarium"
    LOG_FORMAT: str = "%(levelprefix)s | %(asctime)s | %(name)s | %(message)s"
    LOG_LEVEL: str = config.LOG_LEVEL

    version: int = 1
    disable_existing_loggers: bool = False
    formatters: dict = {
        "default": {
            "()": "uvicorn.logging.DefaultFormatter",
            "fmt": LOG_FORMAT,
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    }
    handlers: dict = {
        "default": {
            "formatter": "default",
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stderr",
        },
    }
    loggers: dict = {
        LOGGER_NAME: {"handlers": ["default"], "level": LOG_LEVEL},
    }

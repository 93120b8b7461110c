from pydantic import BaseModel
from typing import List
import os

DEV_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, "true" if default else "false").lower() == "true"


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name, "")
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings(BaseModel):
    """OKR service settings."""

    database_url: str = "sqlite:///./okr.db"
    # Used instead of database_url when OKR_TEST_MODE=1
    test_database_url: str = "sqlite:///./test_okr.db"

    api_title: str = "OKR Progress API"
    api_version: str = "0.1.0"
    api_description: str = "Objectives, key results, initiatives and their progress"

    cors_origins: List[str] = ["*"]
    cors_allow_credentials: bool = True
    cors_allow_methods: List[str] = ["*"]
    cors_allow_headers: List[str] = ["*"]

    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    environment: str = "development"
    debug: bool = True

    # Objective listing
    max_page_size: int = 1000

    # Recompute cycle statuses from their dates when the app starts
    refresh_cycles_on_startup: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables (.env.local wins over .env)."""
        from dotenv import load_dotenv

        load_dotenv(".env.local", override=True)
        load_dotenv(".env", override=False)

        return cls(
            database_url=os.getenv("DATABASE_URL", "sqlite:///./okr.db"),
            test_database_url=os.getenv("TEST_DATABASE_URL", "sqlite:///./test_okr.db"),
            api_title=os.getenv("API_TITLE", "OKR Progress API"),
            api_version=os.getenv("API_VERSION", "0.1.0"),
            cors_origins=_env_list("CORS_ORIGINS", DEV_ORIGINS),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            environment=os.getenv("ENVIRONMENT", "development"),
            debug=_env_bool("DEBUG", True),
            max_page_size=int(os.getenv("MAX_PAGE_SIZE", "1000")),
            refresh_cycles_on_startup=_env_bool("REFRESH_CYCLES_ON_STARTUP", True),
        )


settings = Settings.from_env()

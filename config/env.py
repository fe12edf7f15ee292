"""Environment-driven configuration, read once at settings import."""

from pathlib import Path
from typing import Annotated, List

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent
_ENV_PATH = BASE_DIR / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CINEMA_",
        env_file=str(_ENV_PATH),
        env_ignore_empty=True,
        extra="ignore",
    )

    SECRET_KEY: SecretStr = SecretStr("insecure-dev-key-change-me")
    DEBUG: bool = False
    ALLOWED_HOSTS: Annotated[List[str], NoDecode] = ["localhost", "127.0.0.1"]

    # Database, SQLite unless an engine is configured
    DB_ENGINE: str = "django.db.backends.sqlite3"
    DB_NAME: str = str(BASE_DIR / "db.sqlite3")
    DB_USER: str = ""
    DB_PASSWORD: SecretStr = SecretStr("")
    DB_HOST: str = ""
    DB_PORT: str = ""

    SCREENING_CACHE_TIMEOUT: int = 60
    LOG_LEVEL: str = "INFO"

    @field_validator("ALLOWED_HOSTS", mode="before")
    @classmethod
    def split_hosts(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str):
            return [host.strip() for host in v.split(",") if host.strip()]
        return v

    @property
    def DATABASE(self) -> dict:
        return {
            "ENGINE": self.DB_ENGINE,
            "NAME": self.DB_NAME,
            "USER": self.DB_USER,
            "PASSWORD": self.DB_PASSWORD.get_secret_value(),
            "HOST": self.DB_HOST,
            "PORT": self.DB_PORT,
            "ATOMIC_REQUESTS": False,
        }


env = Settings()

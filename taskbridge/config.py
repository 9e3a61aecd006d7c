from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    host: str = "127.0.0.1"
    port: int = 9000
    log_level: str = "INFO"
    log_file: Path | None = None
    remote_api_url: str = "http://localhost:5000/api"
    request_timeout: float = 10.0
    storage_file: Path = Path("taskbridge_storage.json")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "TASKBRIDGE_"}


@lru_cache
def get_settings() -> Settings:
    return Settings()

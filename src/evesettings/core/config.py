# evesettings/src/evesettings/core/config.py

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings

from evesettings import __version__


class Settings(BaseSettings):
    # ESI (identity lookup service)
    esi_base_url: str = Field(default="https://esi.evetech.net/latest")
    esi_timeout: float = Field(default=10.0)
    esi_max_concurrency: int = Field(default=5)
    esi_user_agent: str = Field(default=f"eve-settings-manager/{__version__}")

    # Local discovery
    extra_settings_paths: List[str] = Field(default_factory=list)

    log_level: str = Field(default="WARNING")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "ESM_",
        "extra": "ignore"
    }


# Instantiate settings
settings = Settings()

ESI_BASE_URL = settings.esi_base_url
ESI_TIMEOUT = settings.esi_timeout
ESI_MAX_CONCURRENCY = settings.esi_max_concurrency
ESI_USER_AGENT = settings.esi_user_agent
LOG_LEVEL = settings.log_level

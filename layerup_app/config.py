from dataclasses import dataclass, field
from typing import Dict, Union

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    WEATHERAPI_KEY: str = ""
    OPENWEATHER_KEY: str = ""
    VISUALCROSSING_KEY: str = ""
    PROVIDER_TIMEOUT: float = 10.0
    DEFAULT_CITY: str = "Toronto"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


@dataclass(frozen=True)
class ConfiguredCredentials:
    """API keys for the providers that have one, keyed by provider id."""
    keys: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class DemoMode:
    """No provider keys at all: the app runs on static demo data."""


Credentials = Union[ConfiguredCredentials, DemoMode]


def resolve_credentials(config: Settings) -> Credentials:
    keys = {
        "weatherapi": config.WEATHERAPI_KEY.strip(),
        "openweather": config.OPENWEATHER_KEY.strip(),
        "visualcrossing": config.VISUALCROSSING_KEY.strip(),
    }
    configured = {name: key for name, key in keys.items() if key}
    if not configured:
        return DemoMode()
    return ConfiguredCredentials(keys=configured)


settings = Settings()

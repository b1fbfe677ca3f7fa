"""Run configuration, built once at startup and passed explicitly."""
from dataclasses import dataclass
import os

from .errors import ConfigError
from .geocoder import DEFAULT_TIMEOUT, NEARBY_SEARCH_URL, SEARCH_RADIUS

API_KEY_ENV = "PHOTO_LOCATOR_API_KEY"
DEFAULT_DIRECTORY = "/"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class Config:
    api_key: str
    directory: str = DEFAULT_DIRECTORY
    timeout: float = DEFAULT_TIMEOUT
    radius: int = SEARCH_RADIUS
    endpoint: str = NEARBY_SEARCH_URL
    log_level: str = "INFO"

    def validate(self) -> "Config":
        if not self.api_key or not self.api_key.strip():
            raise ConfigError("Api Key is mandatory!")
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"unknown log level: {self.log_level}")
        return self


def api_key_from_env(environ=None) -> str:
    env = os.environ if environ is None else environ
    return (env.get(API_KEY_ENV) or "").strip()

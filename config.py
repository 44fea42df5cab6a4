import os
from dataclasses import dataclass

MB = 1024 * 1024


class ConfigurationError(ValueError):
    """An environment setting holds a value the app cannot use"""


def _int_env(name, default):
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    try:
        number = int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a whole number, got {value!r}") from None
    if number < 1:
        raise ConfigurationError(f"{name} must be at least 1, got {number}")
    return number


class Config:
    """Flask settings read from the environment"""

    SECRET_KEY = os.environ.get("SESSION_SECRET", "dev-secret-key-change-in-production")
    MAX_UPLOAD_MB = _int_env("MAX_UPLOAD_MB", 100)
    MAX_CONTENT_LENGTH = MAX_UPLOAD_MB * MB
    # Oldest uploads are dropped once this many are held in memory
    MAX_DATASETS = _int_env("MAX_DATASETS", 20)
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
    PAGE_LENGTH = 10
    TESTING = False


@dataclass(frozen=True)
class LoaderConfig:
    """Immutable settings handed to the DatasetLoader when it is built"""

    max_upload_bytes: int = 100 * MB

    @classmethod
    def from_mapping(cls, settings):
        return cls(max_upload_bytes=int(settings.get("MAX_CONTENT_LENGTH", 100 * MB)))

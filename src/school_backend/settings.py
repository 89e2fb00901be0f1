import os
import threading

from school_backend.exceptions.errors import ConfigurationError

_TRUE_VALUES = ["true", "1", "yes", "on"]


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in _TRUE_VALUES


def _env_number(name: str, default: str, cast):
    raw = os.environ.get(name, default)
    try:
        value = cast(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a {cast.__name__}, got '{raw}'") from e
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got '{raw}'")
    return value


class BackendSettings:
    _instance = None
    _lock = threading.Lock()

    def __init__(self):
        self.load()

    def load(self):
        """(Re)read every setting from the environment."""
        self.DEBUG_MODE = os.environ.get("DEBUG_MODE", "development")

        # Force disable debug info in API responses (overrides DEBUG_MODE)
        self.DISABLE_API_DEBUG_INFO = _env_flag("DISABLE_API_DEBUG_INFO", "false")

        self.LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
        self.CORS_ORIGINS = [
            origin.strip()
            for origin in os.environ.get("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]

        # Database
        self.POSTGRES_HOST = os.environ.get("POSTGRES_HOST", "localhost")
        self.POSTGRES_PORT = os.environ.get("POSTGRES_PORT", "5432")
        self.POSTGRES_USER = os.environ.get("POSTGRES_USER")
        self.POSTGRES_PASSWORD = os.environ.get("POSTGRES_PASSWORD")
        self.POSTGRES_DB = os.environ.get("POSTGRES_DB")
        self.DATABASE_URL = os.environ.get("DATABASE_URL") or (
            f"postgresql+psycopg2://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

        # Cache
        self.CACHE_BACKEND = os.environ.get("CACHE_BACKEND", "memory").lower()
        if self.CACHE_BACKEND not in ("memory", "redis"):
            raise ConfigurationError(
                f"CACHE_BACKEND must be 'memory' or 'redis', got '{self.CACHE_BACKEND}'"
            )
        self.CACHE_PREFIX = os.environ.get("CACHE_PREFIX", "school")
        self.CACHE_VERIFY_RETRIES = _env_number("CACHE_VERIFY_RETRIES", "3", int)
        self.CACHE_VERIFY_DELAY = _env_number("CACHE_VERIFY_DELAY", "0.5", float)
        self.CACHE_TTL_SCALE = _env_number("CACHE_TTL_SCALE", "1.0", float)

        self.REDIS_HOST = os.environ.get("REDIS_HOST", "localhost")
        self.REDIS_PORT = _env_number("REDIS_PORT", "6379", int)
        self.REDIS_PASSWORD = os.environ.get("REDIS_PASSWORD", "")
        self.REDIS_DB = _env_number("REDIS_DB", "0", int)

    @property
    def include_debug_info(self) -> bool:
        return (
            self.DEBUG_MODE.lower() in ["dev", "development", "local"]
            and not self.DISABLE_API_DEBUG_INFO
        )

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(BackendSettings, cls).__new__(cls)
        return cls._instance

settings = BackendSettings()

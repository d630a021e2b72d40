import dataclasses

import dotenv
import httpx

from rangecrypt.utils_core import env
from rangecrypt.utils_core import to_bool


dotenv.load_dotenv()


@dataclasses.dataclass
class Config:
    """Runtime configuration settings."""

    environment: str = env("ENVIRONMENT:development")

    # Logging
    log_level: str = env("LOG_LEVEL:INFO")
    loki_url: str = env("LOKI_URL:", convert=str)
    loki_enabled: bool = env("LOKI_ENABLED:false", convert=to_bool)

    # HTTP range fetching
    http_timeout_seconds: float = env("RANGECRYPT_HTTP_TIMEOUT_SECONDS:30.0", convert=float)
    connect_timeout_seconds: float = env("RANGECRYPT_CONNECT_TIMEOUT_SECONDS:10.0", convert=float)
    verify_ssl: bool = env("RANGECRYPT_VERIFY_SSL:true", convert=to_bool)
    read_chunk_size: int = env("RANGECRYPT_READ_CHUNK_SIZE:65536", convert=int)

    # Only log TIMING lines slower than this (0 = always)
    timing_log_threshold_ms: float = env("RANGECRYPT_TIMING_LOG_THRESHOLD_MS:0.0", convert=float)

    @property
    def http_timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.http_timeout_seconds, connect=self.connect_timeout_seconds)


def get_config() -> Config:
    """Get runtime configuration."""
    cfg = Config()

    if not cfg.environment or not cfg.environment.strip():
        raise ValueError("ENVIRONMENT variable is required but not set or empty")

    if cfg.http_timeout_seconds <= 0 or cfg.connect_timeout_seconds <= 0:
        raise ValueError("HTTP timeouts must be positive")

    if cfg.read_chunk_size <= 0:
        raise ValueError("RANGECRYPT_READ_CHUNK_SIZE must be positive")

    return cfg

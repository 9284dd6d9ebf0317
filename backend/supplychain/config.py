"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - URL settings never end with "/" (one separating slash on concatenation)
    - get_settings() is cached (lru_cache) — single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all settings: local ledger path works out-of-the-box
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Remote delegation
    remote_enabled: bool = False
    remote_url: str = ""

    # Service discovery (Consul)
    discovery_enabled: bool = False
    discovery_service_id: str = "supplychain-gateway"
    discovery_url: str = "http://localhost:8500"
    discovery_cache_ttl_seconds: float = 30.0

    # Ledger gateway
    ledger_gateway_url: str = "http://localhost:8800"
    ledger_channel: str = "supplychainchannel"
    ledger_contract: str = "SupplyChainContract"

    # Outbound HTTP
    http_timeout_seconds: float = 30.0

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("remote_url", "discovery_url", "ledger_gateway_url", mode="before")
    @classmethod
    def strip_trailing_slashes(cls, v: str | None) -> str:
        if v is None:
            return ""
        return str(v).strip().rstrip("/")


@lru_cache
def get_settings() -> Settings:
    return Settings()

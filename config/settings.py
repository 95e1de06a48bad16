from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from constants.constants import (
    BACKFILL_COUNT,
    CHANNEL_CAPACITY,
    DEFAULT_CHAIN_ID,
    DEFAULT_RPC_URL,
    POLL_INTERVAL_SECONDS,
    REPLAY_INTERVAL_SECONDS,
)


class EnvSection(BaseSettings):
    """Base of every settings section. Each section reads its own flat env vars and .env."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


class AppSettings(EnvSection):
    """General application settings."""

    name: str = Field("EVM Block Ingestion", validation_alias="APP_NAME")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")
    log_file: Optional[str] = Field(None, validation_alias="LOG_FILE")


class ChainSettings(EnvSection):
    """Which chains to ingest and where their JSON-RPC endpoints are."""

    rpc_url: str = Field(
        default=DEFAULT_RPC_URL,
        validation_alias="RPC_URL",
        description="JSON-RPC URL used when CHAIN_RPC_URLS is not set",
    )
    chain_id: int = Field(default=DEFAULT_CHAIN_ID, ge=0, validation_alias="CHAIN_ID")
    chain_name: Optional[str] = Field(default=None, validation_alias="CHAIN_NAME")
    # e.g. "1=https://eth.example,8453=https://base.example"
    chain_rpc_urls: Optional[str] = Field(
        default=None,
        validation_alias="CHAIN_RPC_URLS",
        description="Comma or newline separated <chain_id>=<url> entries, in fan-in order",
    )


class StreamerSettings(EnvSection):
    """Settings for the per-chain fetchers and the consumer loop."""

    backfill_count: int = Field(default=BACKFILL_COUNT, gt=0, validation_alias="BACKFILL_COUNT")
    poll_interval_seconds: float = Field(default=POLL_INTERVAL_SECONDS, gt=0, validation_alias="POLL_INTERVAL_SECONDS")
    channel_capacity: int = Field(default=CHANNEL_CAPACITY, gt=0, validation_alias="CHANNEL_CAPACITY")
    max_drain_per_cycle: int = Field(default=32, gt=0, validation_alias="MAX_DRAIN_PER_CYCLE")


class FixtureSettings(EnvSection):
    """Settings for recording and replaying payload fixtures."""

    record_path: Optional[str] = Field(None, validation_alias="FIXTURE_RECORD_PATH")
    replay_path: Optional[str] = Field(None, validation_alias="FIXTURE_REPLAY_PATH")
    replay_interval_seconds: float = Field(
        default=REPLAY_INTERVAL_SECONDS, ge=0, validation_alias="FIXTURE_REPLAY_INTERVAL_SECONDS"
    )


class Settings(BaseSettings):
    """
    Main Settings class that composes all sub-settings.
    Every section is itself a BaseSettings bound to flat env vars through validation_alias.
    """

    app: AppSettings = Field(default_factory=AppSettings)
    chains: ChainSettings = Field(default_factory=ChainSettings)
    streamer: StreamerSettings = Field(default_factory=StreamerSettings)
    fixture: FixtureSettings = Field(default_factory=FixtureSettings)

    # Config to load from .env file
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


# Singleton instance
settings = Settings()

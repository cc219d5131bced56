"""Application configuration using Pydantic settings."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Service configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RNS_",
        extra="ignore",
    )

    environment: Literal["local", "test", "staging", "production"] = Field(
        default="local",
        validation_alias="env",
    )
    service_name: str = Field(default="rental-notary")
    database_url: str = Field(default="sqlite:///./data/rental_notary.db")
    sql_echo: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=True)
    cors_origins: List[str] | str = Field(default_factory=list)

    pinata_api_url: str = Field(default="https://api.pinata.cloud")
    pinata_api_key: str | None = Field(default=None)
    pinata_secret_key: str | None = Field(default=None)
    pinata_jwt: str | None = Field(default=None)
    ipfs_gateway_url: str = Field(default="https://gateway.pinata.cloud/ipfs")
    content_store_timeout: float = Field(default=30.0)

    ledger_rpc_url: str | None = Field(default=None)
    ledger_private_key: str | None = Field(default=None)
    ledger_contract_address: str | None = Field(default=None)
    ledger_chain_id: int | None = Field(default=None)
    ledger_confirmation_timeout: float = Field(default=120.0)
    ledger_rent_decimals: int = Field(default=18, ge=0, le=36)

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.upper()

    @field_validator("cors_origins")
    @classmethod
    def parse_cors_origins(cls, value: str | List[str] | None) -> List[str]:
        if value is None or value == "":
            return []
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator(
        "pinata_api_key",
        "pinata_secret_key",
        "pinata_jwt",
        "ledger_rpc_url",
        "ledger_private_key",
        "ledger_contract_address",
        mode="before",
    )
    @classmethod
    def empty_string_to_none(cls, value: str | None) -> str | None:
        if value == "":
            return None
        return value

    @field_validator("ledger_chain_id", mode="before")
    @classmethod
    def empty_chain_id_to_none(cls, value: int | str | None) -> int | str | None:
        if value in (None, ""):
            return None
        return value


@lru_cache
def get_settings() -> AppSettings:
    """Return cached application settings instance."""

    return AppSettings()

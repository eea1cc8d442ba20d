"""
Configuration for vote transaction fee estimation.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from votereg.constants import MAINNET_MAGIC, MOCK_TTL, TESTNET_MAGIC
from votereg.models import NetworkId, NetworkType


class Settings(BaseSettings):
    """Environment defaults (VOTEREG_* variables or .env)."""

    model_config = SettingsConfigDict(
        env_prefix="VOTEREG_", env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    network: NetworkType = NetworkType.MAINNET
    testnet_magic: int = TESTNET_MAGIC
    ttl: int = MOCK_TTL
    log_level: str = "INFO"


def get_settings() -> Settings:
    return Settings()


class VoteFeeConfig(BaseModel):
    """Configuration for a fee estimation / UTxO selection run."""

    network: NetworkType = NetworkType.MAINNET
    # Network magic; defaults to the well-known magic of the network
    network_magic: int | None = Field(default=None, ge=0)
    ttl: int = Field(default=MOCK_TTL, ge=0, description="Time-to-live slot used for probes")

    protocol_params_file: Path
    utxos_file: Path | None = None
    metadata_file: Path | None = None
    vote_public_key: str | None = Field(default=None, description="Vote public key (hex)")
    stake_verification_key: str | None = Field(
        default=None, description="Stake verification key (hex)"
    )
    out_file: Path | None = None

    # Fail instead of returning a selection that does not cover the fee
    require_sufficient: bool = True

    @model_validator(mode="after")
    def validate_config(self) -> VoteFeeConfig:
        """Fill the default network magic and check the metadata sources."""
        if self.network_magic is None:
            magic = MAINNET_MAGIC if self.network == NetworkType.MAINNET else TESTNET_MAGIC
            object.__setattr__(self, "network_magic", magic)

        keys_given = (self.vote_public_key is not None, self.stake_verification_key is not None)
        if any(keys_given) and not all(keys_given):
            raise ValueError(
                "vote_public_key and stake_verification_key must be given together"
            )
        if all(keys_given) and self.metadata_file is not None:
            raise ValueError("Use either metadata_file or the registration keys, not both")

        return self

    @property
    def network_id(self) -> NetworkId:
        assert self.network_magic is not None
        return NetworkId(self.network, self.network_magic)

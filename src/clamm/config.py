import tomllib
from pathlib import Path
from typing import Annotated

import tomlkit
from pydantic import BaseModel, Field, PlainSerializer, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from clamm.logging import logger
from clamm.types.aliases import ChainId, Pip

CONFIG_DIR = Path.home() / ".config" / "clamm"
CONFIG_FILE = CONFIG_DIR / "config.toml"


class QuoteSettings(BaseModel):
    # Seconds allowed for each individual provider query
    query_timeout: float = Field(default=5.0, gt=0)
    # Total attempts for a query failing with a transient error
    query_retries: int = Field(default=1, ge=1)
    # Seconds after which a quote should be re-requested before submitting a transaction
    staleness_window: float = Field(default=15.0, gt=0)
    fee_tiers: list[Pip] = Field(default_factory=lambda: [100, 500, 3000, 10000])
    constant_product_gas: int = Field(default=150_000, ge=0)
    concentrated_liquidity_gas: int = Field(default=180_000, ge=0)
    wrap_gas: int = Field(default=50_000, ge=0)
    unwrap_gas: int = Field(default=40_000, ge=0)

    @field_validator("fee_tiers", mode="after")
    def validate_fee_tiers(
        cls,  # noqa: N805
        fee_tiers: list[Pip],
    ) -> list[Pip]:
        """
        Reject duplicate fee tiers, which would double-query the same pool.
        """

        if len(set(fee_tiers)) != len(fee_tiers):
            msg = "Fee tiers must be unique."
            raise ValueError(msg)
        return fee_tiers


class PriceSettings(BaseModel):
    significant_digits: int = Field(default=18, gt=0)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="CLAMM_", env_nested_delimiter="__")

    quotes: QuoteSettings = Field(default_factory=QuoteSettings)
    prices: PriceSettings = Field(default_factory=PriceSettings)
    # Serialize chain IDs as strings, since TOML table keys must be strings
    wrapped_native: Annotated[
        dict[ChainId, str],
        PlainSerializer(
            lambda tokens: {str(chain_id): address for chain_id, address in tokens.items()},
            return_type=dict[str, str],
        ),
    ] = Field(default_factory=dict)


def load_config_from_file(config_path: Path) -> Settings:
    return Settings.model_validate(
        tomllib.loads(
            config_path.read_text(),
        ),
    )


def save_config_to_file(config: Settings) -> None:
    CONFIG_FILE.write_text(
        tomlkit.dumps(
            config.model_dump(),
        ),
    )


if not CONFIG_DIR.exists():
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    logger.info(f"Created a configuration directory at {CONFIG_DIR}.")

if CONFIG_FILE.exists():
    settings = load_config_from_file(CONFIG_FILE)
else:
    settings = Settings()
    save_config_to_file(settings)
    logger.info(f"Created a configuration file at {CONFIG_FILE}.")

"""Configuration management for trip-settle."""

from decimal import Decimal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TRIP_SETTLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Balances within this of zero count as settled
    epsilon: Decimal = Decimal("0.01")

    # Display settings
    currency_symbol: str = "₹"
    default_trip_name: str = "Trip"  # Report title when the ledger has no name

    @field_validator("epsilon")
    @classmethod
    def epsilon_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("epsilon must be positive")
        return v


def load_settings() -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings()
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load settings. Check the TRIP_SETTLE_* variables in "
            f"your environment or .env file.\n"
            f"Error: {e}"
        ) from e

"""
Application settings with environment-based configuration.

Priority (highest to lowest):
1. Environment variables (from .env or system)
2. Environment-specific YAML config file (development.yaml, production.yaml)
3. Default YAML config file (default.yaml)
4. Pydantic defaults
"""

import os
from pathlib import Path
from typing import Annotated, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    The RPC URL may embed an API key, so production values should come
    from environment variables rather than YAML files.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )

    # Application
    APP_NAME: str = "Solde"
    ENV: str = Field(default="development", description="Environment name")

    # Solana RPC
    SOLANA_RPC_URL: str = Field(
        default="https://api.devnet.solana.com",
        description="Solana JSON-RPC endpoint",
    )
    SOLANA_NETWORK: str = Field(default="devnet")
    SOLANA_COMMITMENT: str = Field(default="confirmed")
    RPC_TIMEOUT: float = Field(
        default=10.0,
        ge=1.0,
        le=120.0,
        description="Upper bound for a single getBalance call in seconds",
    )

    # Local cache database
    DATA_DIR: str = Field(
        default="~/.local/share/solde",
        description="Directory holding the SQLite cache",
    )
    DATABASE_FILE: str = Field(default="balances.db")
    DATABASE_ECHO: bool = Field(default=False)

    # Tracked wallets
    WALLET_ADDRESSES: Annotated[List[str], NoDecode] = Field(default_factory=list)
    FETCH_INTERVAL_SECONDS: float = Field(
        default=300.0,
        ge=1.0,
        description="Period of the background fetch loop",
    )

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_DIR: Optional[str] = Field(default=None)

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"Invalid LOG_LEVEL. Must be one of: {allowed}")
        return v_upper

    @field_validator("SOLANA_NETWORK")
    @classmethod
    def validate_solana_network(cls, v: str) -> str:
        """Validate Solana network."""
        allowed = ["devnet", "testnet", "mainnet-beta"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"Invalid SOLANA_NETWORK. Must be one of: {allowed}")
        return v_lower

    @field_validator("SOLANA_COMMITMENT")
    @classmethod
    def validate_commitment(cls, v: str) -> str:
        """Validate commitment level."""
        allowed = ["processed", "confirmed", "finalized"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"Invalid SOLANA_COMMITMENT. Must be one of: {allowed}")
        return v_lower

    @field_validator("DATA_DIR")
    @classmethod
    def expand_data_dir(cls, v: str) -> str:
        """Expand home directory in data path."""
        return os.path.expanduser(v)

    @field_validator("WALLET_ADDRESSES", mode="before")
    @classmethod
    def split_wallet_addresses(cls, v):
        """Accept comma-separated string as well as a list."""
        if v is None:
            return []
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v

    @computed_field
    @property
    def database_path(self) -> str:
        """Absolute path of the SQLite cache file."""
        return str(Path(self.DATA_DIR) / self.DATABASE_FILE)

    @computed_field
    @property
    def database_url(self) -> str:
        """SQLAlchemy async URL for the cache file."""
        return f"sqlite+aiosqlite:///{self.database_path}"


def load_config(
    config_file: Optional[str] = None,
    env_file: Optional[str] = None,
    env: Optional[str] = None,
) -> Settings:
    """
    Load configuration from YAML files and environment variables.

    Priority: ENV vars > environment-specific YAML > default YAML > defaults

    Args:
        config_file: Optional YAML config filename override
        env_file: Optional .env filename (e.g., ".env.development")
        env: Optional environment name override (e.g., "development", "test")

    Returns:
        Settings instance

    Raises:
        ValidationError: If a value fails validation
    """
    current_file = Path(__file__).resolve()
    project_root = current_file.parent.parent.parent.parent
    config_dir = project_root / "config"

    environment = env or os.getenv("ENV", "production")

    env_map = {
        "production": (".env.production", "production.yaml"),
        "development": (".env.development", "development.yaml"),
        "test": (".env.test", "test.yaml"),
    }

    default_env_file, default_config_file = env_map.get(
        environment, (".env.production", "production.yaml")
    )
    if env_file is None:
        env_file = default_env_file
    if config_file is None:
        config_file = default_config_file

    env_file_path = project_root / env_file
    if env_file_path.exists():
        load_dotenv(env_file_path, override=True)

    default_config_path = config_dir / "default.yaml"
    merged_config = {}

    if default_config_path.exists():
        with open(default_config_path, "r") as f:
            loaded = yaml.safe_load(f)
            if loaded:
                merged_config = loaded

    if config_file:
        env_config_path = config_dir / config_file
        if env_config_path.exists():
            with open(env_config_path, "r") as f:
                loaded = yaml.safe_load(f)
                if loaded:
                    merged_config.update(loaded)

    # Environment variables win over YAML values
    for key in list(merged_config):
        if key in os.environ:
            merged_config.pop(key)

    merged_config.setdefault("ENV", environment)

    return Settings(**merged_config)


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or initialize global settings singleton."""
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def override_settings(new_settings: Settings) -> None:
    """Override global settings (for testing)."""
    global _settings
    _settings = new_settings


def reset_settings() -> None:
    """Reset settings to force re-initialization (for testing)."""
    global _settings
    _settings = None

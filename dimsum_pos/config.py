from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class AppConfig(BaseSettings):
    """Application configuration using Pydantic BaseSettings.

    Loads configuration from environment variables and .env file (if present).
    Fields are type-checked and validated. Defaults are provided where appropriate.
    """
    # Application
    app_env: str = "local"
    log_level: str = "DEBUG"
    log_file: Optional[str] = None

    # Data paths
    data_dir: str = "sample_data"

    # Outlet / receipt settings
    store_name: str = "DIMSUM OUTLET 1"
    default_branch_name: str = "Outlet 1"
    currency_prefix: str = "Rp"
    receipt_width: int = 48

    # Checkout
    order_number_strategy: Literal["random", "sequence"] = "random"

    # Reporting
    top_items_limit: int = 5
    daily_series_days: int = 7

    # Seed data settings
    default_seed_days: int = 14
    default_seed_value: int = 42
    default_seed_orders_per_day: int = 40

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

_config: Optional[AppConfig] = None

def get_config() -> AppConfig:
    """Return the AppConfig instance (singleton pattern)."""
    global _config
    if _config is None:
        _config = AppConfig()
    return _config

def set_config_for_test(**kwargs):
    """For testing only: override the AppConfig instance with new values."""
    global _config
    _config = AppConfig(**kwargs)

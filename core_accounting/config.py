"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from decimal import Decimal
from pydantic_settings import BaseSettings, SettingsConfigDict


class AccountingConfig(BaseSettings):
    """Chart of accounts and reporting configuration"""

    model_config = SettingsConfigDict(
        env_prefix="COREACCT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Storage configuration
    database_url: str = "sqlite:///:memory:"  # or memory:// for InMemoryStorage

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text

    # Chart of accounts rules
    max_hierarchy_depth: int = 4  # root is depth 0, deepest allowed child is depth 3
    path_separator: str = " > "
    default_accounts_enabled: bool = True

    # Reporting rules
    balance_tolerance: str = "0.01"  # Decimal string

    @property
    def tolerance(self) -> Decimal:
        """Balance tolerance as a Decimal"""
        return Decimal(self.balance_tolerance)


# Global configuration instance
config = AccountingConfig()


def get_config() -> AccountingConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> AccountingConfig:
    """Reload configuration from environment"""
    global config
    config = AccountingConfig()
    return config

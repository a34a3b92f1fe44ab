"""
Application configuration.

Loads settings from environment variables and .env file.
All configuration is centralized here, no scattered magic strings.
"""

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_default: Default rate limit for all endpoints.
        rate_limit_heavy: Rate limit for transaction-submitting endpoints.

    Ledger settings describe where the contract lives and which account
    signs for the marketplace. The descriptor for ``ethereum_contract``
    on ``ethereum_network`` is read from ``descriptor_directory``.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    project_name: str = "CarTrade"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_default: str = "60/minute"
    rate_limit_heavy: str = "10/minute"

    # Ledger
    ethereum_rpc_url: str = "http://localhost:8545"
    ethereum_network: str = "development"
    ethereum_chain_id: int | None = None
    ethereum_contract: str = "CarTrading"
    descriptor_directory: str = "build/receipts"
    owner_address: str = ""
    owner_private_key: SecretStr = SecretStr("")

    # Transactions
    gas_limit: int | None = None
    confirmation_timeout_seconds: float = 120.0
    receipt_poll_interval_seconds: float = 1.0
    rpc_request_timeout_seconds: float = 10.0


settings = Settings()

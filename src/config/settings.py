"""Application settings using Pydantic BaseSettings."""

import logging
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
_VALID_STORAGE_BACKENDS = {"memory", "json"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Microfund Admin"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        upper = v.upper()
        if upper not in _VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of {_VALID_LOG_LEVELS}, got '{v}'")
        return upper

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, v: str) -> str:
        lower = v.lower()
        if lower not in _VALID_STORAGE_BACKENDS:
            raise ValueError(
                f"storage_backend must be one of {_VALID_STORAGE_BACKENDS}, got '{v}'"
            )
        return lower

    @model_validator(mode="after")
    def validate_rates(self) -> "Settings":
        for field_name in (
            "loan_interest_rate",
            "emi_interest_rate",
            "diwali_fund_bonus_rate",
            "diwali_fund_early_withdrawal_rate",
        ):
            value = getattr(self, field_name)
            if not 0 <= value < 1:
                raise ValueError(f"{field_name} must be in [0, 1), got {value}")
        return self

    @model_validator(mode="after")
    def validate_loan_limits(self) -> "Settings":
        if self.loan_amount_step <= 0:
            raise ValueError(f"loan_amount_step must be positive, got {self.loan_amount_step}")
        if self.max_loan_amount < self.loan_amount_step:
            raise ValueError("max_loan_amount must be at least loan_amount_step")
        if not self.diwali_fund_contributions:
            raise ValueError("diwali_fund_contributions must not be empty")
        return self

    @model_validator(mode="after")
    def warn_wildcard_origins(self) -> "Settings":
        if self.allowed_origins == ["*"]:
            logging.getLogger(__name__).warning(
                "allowed_origins is set to ['*']; consider restricting in production"
            )
        return self

    # Azure AI Foundry
    azure_ai_project_endpoint: str = ""

    # Anthropic
    anthropic_api_key: str | None = None

    # Face Match Agent
    face_match_agent_model: str = "gpt-4o"
    face_match_temperature: float = 0.0
    face_match_max_tokens: int = 512
    face_match_image_types: list[str] = ["image/png", "image/jpeg", "image/webp", "image/gif"]

    # CORS
    allowed_origins: list[str] = ["*"]

    # Storage
    storage_backend: str = "memory"
    storage_path: str = "data/ledger.json"

    # Vault
    vault_initial_balance: float = 100000.0

    # Loans
    loan_interest_rate: float = 0.10
    emi_interest_rate: float = 0.12
    max_loan_amount: float = 100000.0
    loan_amount_step: float = 1000.0

    # Diwali Fund
    diwali_fund_contributions: list[int] = [100, 1000, 5000]
    diwali_fund_bonus_rate: float = 0.10
    diwali_fund_early_withdrawal_rate: float = 0.10
    diwali_month: int = 11
    diwali_day: int = 1


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

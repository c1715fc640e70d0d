"""Application configuration using pydantic settings with structured sections."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False


class DatabaseSettings(BaseModel):
    url: str = Field(default="sqlite+aiosqlite:///./billing.db", alias="url")
    echo: bool = False
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None


class SecuritySettings(BaseModel):
    secret_key: str = Field(default="change-me", min_length=8)
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    admin_roles: tuple[str, ...] = ("owner", "admin")


class PaymentSettings(BaseModel):
    """Payment provider credentials.

    ``signing_secret`` defaults to the provider key secret, which is what
    Razorpay signs checkout callbacks with.
    """

    provider_key_id: str = "rzp_test_key"
    provider_key_secret: SecretStr = SecretStr("rzp_test_secret")
    signing_secret: Optional[SecretStr] = None
    api_base_url: str = "https://api.razorpay.com/v1"
    provider_timeout: float = 10.0


class PricingSettings(BaseModel):
    currency: str = "INR"
    # minor currency units (paise) per token
    unit_prices: dict[str, int] = Field(default_factory=lambda: {"basic": 50, "premium": 7500})
    max_quantity: int = Field(default=100_000, gt=0)


class LoggingSettings(BaseModel):
    level: str = "INFO"
    json_format: bool = False


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    project_name: str = "Token Billing Service"
    api_prefix: str = "/api"
    cors_origins: list[str] = ["*"]

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    security: SecuritySettings = SecuritySettings()
    payments: PaymentSettings = PaymentSettings()
    pricing: PricingSettings = PricingSettings()
    logging: LoggingSettings = LoggingSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def secret_key(self) -> str:
        return self.security.secret_key

    @property
    def algorithm(self) -> str:
        return self.security.algorithm

    @property
    def access_token_expire_minutes(self) -> int:
        return self.security.access_token_expire_minutes

    @property
    def payment_signing_secret(self) -> str:
        secret = self.payments.signing_secret or self.payments.provider_key_secret
        return secret.get_secret_value()


@lru_cache()
def get_settings() -> Settings:
    return Settings()

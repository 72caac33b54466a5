"""
Payment gateway settings using pydantic-settings v2 with nested env keys.

Examples:
    LIQPAY__PUBLIC_KEY=sandbox_i000000
    LIQPAY__PRIVATE_KEY=sandbox_secret
    LIQPAY__DEBUG=true
    TIMEOUTS__TOTAL=10
"""
from __future__ import annotations

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, BaseModel, Field

from shared.codes.payment_codes import (
    LIQPAY_API_VERSION,
    LIQPAY_CHECKOUT_URL,
    LIQPAY_REQUEST_URL,
)


class PaymentTimeouts(BaseModel):
    connect: float = 1.0
    read: float = 3.0
    write: float = 3.0
    total: float = 5.0


class LiqPaySettings(BaseModel):
    public_key: Optional[str] = None
    private_key: Optional[str] = None
    debug: bool = False
    api_version: str = LIQPAY_API_VERSION
    checkout_url: str = LIQPAY_CHECKOUT_URL
    request_url: str = LIQPAY_REQUEST_URL


class PaymentSettings(BaseSettings):
    default_provider: str = Field(
        default="liqpay",
        validation_alias=AliasChoices("PAYMENT__DEFAULT_PROVIDER", "default_provider"),
    )
    debug: bool = False
    timeouts: PaymentTimeouts = Field(default_factory=PaymentTimeouts)

    liqpay: LiqPaySettings = Field(default_factory=LiqPaySettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )


payment_settings = PaymentSettings()

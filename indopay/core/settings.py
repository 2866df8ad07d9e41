"""
Payment SDK settings using pydantic-settings v2 with nested env keys.

Nothing reads the environment at import time; call get_payment_settings().
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from indopay.domain.payment.entity import Environment


class PaymentTimeouts(BaseModel):
    connect: float = 5.0
    read: float = 30.0
    write: float = 30.0
    total: float = 30.0


class InstallmentOptions(BaseModel):
    required: Optional[bool] = None
    terms: Optional[dict[str, list[int]]] = None


class CreditCardOptions(BaseModel):
    secure: Optional[bool] = None
    bank: Optional[str] = None
    installment: Optional[InstallmentOptions] = None


class MidtransOptions(BaseModel):
    enabled_payments: Optional[list[str]] = None  # gopay, qris, bank_transfer, ...
    credit_card: Optional[CreditCardOptions] = None


class MidtransSettings(BaseModel):
    server_key: Optional[str] = None
    client_key: Optional[str] = None
    environment: Environment = Environment.SANDBOX
    options: MidtransOptions = Field(default_factory=MidtransOptions)


class PaymentSettings(BaseSettings):
    default_provider: str = Field(default="midtrans", validation_alias="PAYMENT__DEFAULT_PROVIDER")
    debug: bool = Field(default=False, validation_alias="PAYMENT__DEBUG")
    timeouts: PaymentTimeouts = Field(default_factory=PaymentTimeouts)

    midtrans: MidtransSettings = Field(default_factory=MidtransSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )


@lru_cache
def get_payment_settings() -> PaymentSettings:
    return PaymentSettings()

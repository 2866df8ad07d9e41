"""
Factory for payment gateway clients.
"""
from __future__ import annotations

from typing import Optional

from indopay.application.ports.payment_gateway import PaymentGateway
from indopay.core.settings import PaymentSettings, get_payment_settings


def get_payment_gateway(provider: Optional[str] = None, settings: Optional[PaymentSettings] = None, **kwargs) -> PaymentGateway:
    settings = settings or get_payment_settings()
    name = (provider or settings.default_provider).lower()
    if name in {"midtrans", "snap"}:
        from .midtrans_client import MidtransClient
        return MidtransClient.from_settings(settings, **kwargs)
    raise ValueError(f"Unsupported payment provider: {name}")

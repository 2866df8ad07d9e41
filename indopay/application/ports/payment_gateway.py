"""
Payment gateway port exposing a replaceable protocol.

Merchant code depends on this Protocol; infrastructure implements adapters.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from indopay.application.dtos.payments import (
    CreateInvoiceParams,
    Invoice,
    PaymentStatusResponse,
    WebhookNotification,
)


@runtime_checkable
class PaymentGateway(Protocol):
    """Gateway protocol for third-party payment providers.

    Network operations are async; webhook verification and parsing are pure
    and synchronous.
    """

    provider: str

    async def create_invoice(self, params: CreateInvoiceParams) -> Invoice: ...

    async def get_status(self, order_id: str) -> PaymentStatusResponse: ...

    def extract_webhook_signature(
        self, body: Mapping[str, Any], headers: Optional[Mapping[str, Any]] = None
    ) -> Optional[str]: ...

    def verify_webhook(self, body: Mapping[str, Any], headers: Optional[Mapping[str, Any]] = None) -> bool: ...

    def parse_webhook(self, body: Mapping[str, Any]) -> WebhookNotification: ...

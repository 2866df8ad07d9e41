"""
Payment DTOs (Pydantic v2) used at SDK boundaries.

Field names are snake_case; camelCase aliases (``orderId``, ``expiresIn``...)
are accepted on input. Metadata and raw payloads are opaque passthroughs.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from indopay.domain.payment.entity import Currency, PaymentStatus


class _DTO(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CustomerInfo(_DTO):
    # No format validation; callers own it
    name: str
    email: str
    phone: str


class InvoiceItem(_DTO):
    id: Optional[str] = None
    name: str
    price: Decimal
    quantity: int
    description: Optional[str] = None


class CreateInvoiceParams(_DTO):
    amount: Decimal
    currency: Currency
    order_id: str
    customer: CustomerInfo
    items: Optional[list[InvoiceItem]] = None
    metadata: Optional[dict[str, Any]] = None
    expires_in: Optional[int] = Field(default=None, description="Minutes until expiry")
    success_url: Optional[str] = None
    failure_url: Optional[str] = None
    description: Optional[str] = None


class Invoice(_DTO):
    id: str  # gateway token / transaction id
    order_id: str
    amount: Decimal
    currency: Currency
    status: PaymentStatus
    payment_url: str
    expires_at: datetime
    created_at: datetime
    metadata: Optional[dict[str, Any]] = None


class PaymentStatusResponse(_DTO):
    id: str = ""
    order_id: str
    status: PaymentStatus
    amount: Decimal = Decimal("0")
    paid_at: Optional[datetime] = None
    payment_method: Optional[str] = None  # e.g. gopay, qris, bank_transfer
    metadata: Optional[dict[str, Any]] = None


class WebhookNotification(_DTO):
    order_id: str
    status: PaymentStatus
    amount: Decimal
    paid_at: Optional[datetime] = None
    payment_method: Optional[str] = None
    # original payload kept verbatim for audit
    raw_data: Any

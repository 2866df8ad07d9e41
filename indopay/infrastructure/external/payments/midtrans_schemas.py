"""
Midtrans Snap wire models.

Dumped with ``exclude_none`` so optional blocks are omitted from the payload
instead of being sent as null.
"""
from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import BaseModel


Number = Union[int, float]


class TransactionDetails(BaseModel):
    order_id: str
    gross_amount: Number


class CustomerDetails(BaseModel):
    first_name: str
    email: str
    phone: str


class ItemDetails(BaseModel):
    id: str
    name: str
    price: Number
    quantity: int


class Expiry(BaseModel):
    start_time: str  # YYYY-MM-DD HH:mm:ss +0700
    unit: str = "minute"
    duration: int


class Callbacks(BaseModel):
    finish: Optional[str] = None


class SnapRequest(BaseModel):
    transaction_details: TransactionDetails
    customer_details: CustomerDetails
    item_details: Optional[list[ItemDetails]] = None
    enabled_payments: Optional[list[str]] = None
    credit_card: Optional[dict[str, Any]] = None
    expiry: Optional[Expiry] = None
    callbacks: Optional[Callbacks] = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)

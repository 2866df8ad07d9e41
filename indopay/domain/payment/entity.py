"""
Canonical payment enums shared by every gateway adapter.

Keep this layer free of infrastructure dependencies.
"""
from __future__ import annotations

from enum import Enum


class Currency(str, Enum):
    IDR = "IDR"
    USD = "USD"
    SGD = "SGD"
    MYR = "MYR"


class Environment(str, Enum):
    SANDBOX = "sandbox"
    PRODUCTION = "production"


class PaymentStatus(str, Enum):
    """Cross-gateway payment lifecycle state"""
    PENDING = "pending"           # created, waiting for the customer
    PROCESSING = "processing"     # being processed by the gateway
    PAID = "paid"
    FAILED = "failed"
    EXPIRED = "expired"           # payment link expired
    REFUNDED = "refunded"
    CANCELLED = "cancelled"

    @property
    def is_final(self) -> bool:
        """True for states with no outgoing edge (paid may still be refunded)."""
        return self in _FINAL_STATUSES

    def can_transition_to(self, target: "PaymentStatus") -> bool:
        if target == self:
            return True
        return target in _TRANSITIONS.get(self, frozenset())


_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({
        PaymentStatus.PROCESSING,
        PaymentStatus.PAID,
        PaymentStatus.FAILED,
        PaymentStatus.EXPIRED,
        PaymentStatus.CANCELLED,
    }),
    PaymentStatus.PROCESSING: frozenset({
        PaymentStatus.PAID,
        PaymentStatus.FAILED,
        PaymentStatus.EXPIRED,
        PaymentStatus.CANCELLED,
    }),
    PaymentStatus.PAID: frozenset({PaymentStatus.REFUNDED}),
}

_FINAL_STATUSES = frozenset({
    PaymentStatus.FAILED,
    PaymentStatus.EXPIRED,
    PaymentStatus.REFUNDED,
    PaymentStatus.CANCELLED,
})

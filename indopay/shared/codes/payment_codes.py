"""
Payment specific codes and provider status mapping.
"""
from __future__ import annotations

from enum import IntEnum


class PaymentCode(IntEnum):
    SUCCESS = 0

    # SDK errors (6xxxx)
    CONFIG_ERROR = 60000
    API_ERROR = 60001
    WEBHOOK_ERROR = 60002


# Provider -> canonical status. Unknown provider statuses fall back to "pending".
PROVIDER_STATUS_TO_INTERNAL = {
    "midtrans": {
        # Per transaction_status
        "pending": "pending",
        "capture": "paid",
        "settlement": "paid",
        "deny": "failed",
        "cancel": "cancelled",
        "expire": "expired",
        "refund": "refunded",
    },
}

DEFAULT_INTERNAL_STATUS = "pending"

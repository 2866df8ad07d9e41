"""
Shared codes used across layers (domain/infrastructure).

This package exposes PaymentCode at `indopay.shared.codes` and keeps
the provider status tables under `indopay.shared.codes.payment_codes`.
"""
from indopay.shared.codes.payment_codes import PaymentCode, PROVIDER_STATUS_TO_INTERNAL


__all__ = ["PaymentCode", "PROVIDER_STATUS_TO_INTERNAL"]

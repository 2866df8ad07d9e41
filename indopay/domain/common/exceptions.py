"""Payment SDK exceptions shared by the domain and infrastructure layers.

Every error carries a numeric ``code`` and an ``error_type`` discriminant so
callers can either catch the concrete class or switch on the tag.
"""
from __future__ import annotations

from typing import Any, Optional

from indopay.shared.codes import PaymentCode


class PaymentError(Exception):
    """Base class for payment SDK errors"""

    def __init__(
        self,
        message: str,
        *,
        code: int,
        error_type: str = "PaymentError",
        details: Optional[dict] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        super().__init__(self.message)


class ConfigurationError(PaymentError):
    """Required credentials or options are missing."""

    def __init__(self, message: str, *, details: Optional[dict] = None):
        super().__init__(
            message,
            code=PaymentCode.CONFIG_ERROR,
            error_type="ConfigurationError",
            details=details,
        )


class APIError(PaymentError):
    """The gateway answered with a non-2xx status or could not be reached."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Any = None,
        *,
        details: Optional[dict] = None,
    ):
        self.status_code = status_code
        self.response = response
        full_details = {"status_code": status_code}
        if details:
            full_details.update(details)
        super().__init__(
            message,
            code=PaymentCode.API_ERROR,
            error_type="APIError",
            details=full_details,
        )

    def __str__(self):
        parts = [self.message]
        if self.status_code:
            parts.append(f"Status: {self.status_code}")
        return " | ".join(parts)


class WebhookError(PaymentError):
    def __init__(self, message: str, *, reason: str, provider: Optional[str] = None):
        self.reason = reason
        super().__init__(
            message,
            code=PaymentCode.WEBHOOK_ERROR,
            error_type="WebhookError",
            details={"reason": reason, "provider": provider},
        )
